"""
Family Graph - Web Application
Візуалізація: SVG з автоматичним компонуванням, фокус на парі.
Функціонал: додавання дітей/партнерів/батьків, перейменування, збереження.
Мова: Українська.
"""

import streamlit as st
from st_click_detector import click_detector

# Імпорт локальних модулів
from data_manager import DataManager
from family_graph import GENDER_FEMALE, GENDER_MALE
from focus_resolver import ViewSession
from layout_engine import LayoutConfig
from svg_renderer import SVGRenderer
from tree_view import TreeView
from utils.avatar_assets import AvatarProvider
from utils.persistence_service import LOCAL_DATA_DIR

GENDER_LABELS = {"Чоловік": GENDER_MALE, "Жінка": GENDER_FEMALE}

# --- КОНФІГУРАЦІЯ СТОРІНКИ ---
st.set_page_config(
    page_title="Сімейний граф",
    page_icon="🌳",
    layout="wide",
    initial_sidebar_state="expanded"
)


def _secret(key, default):
    try:
        return st.secrets.get(key, default)
    except FileNotFoundError:
        return default


# --- 1. ДАНІ ---
@st.cache_resource
def get_data_manager(username: str):
    dm = DataManager(username, data_dir=_secret('data_dir', LOCAL_DATA_DIR))
    if not dm.load_project():
        st.warning("Не вдалося прочитати збережене дерево. Відкрито порожнє.")
    return dm


def get_tree_view(dm: DataManager) -> TreeView:
    if 'view_session' not in st.session_state:
        st.session_state.view_session = ViewSession(selected_id=dm.tree.roots[0] if dm.tree.roots else None)
    viewport = (float(_secret('viewport_width', 1200)), float(_secret('viewport_height', 700)))
    return TreeView(dm.tree, st.session_state.view_session, LayoutConfig(), viewport)


def save_state(dm: DataManager):
    if not dm.save_project():
        st.sidebar.error("Помилка збереження.")
    st.rerun()


def report(result, success_text: str):
    if result.ok:
        st.toast(success_text, icon="✅")
    else:
        st.session_state.last_error = result.message


# --- 2. ВІЗУАЛІЗАЦІЯ ---
def render_graph(dm: DataManager, view: TreeView):
    scene = view.update_view()
    renderer = SVGRenderer(scene, dm.tree, AvatarProvider(_secret('asset_dir', 'assets')))
    # Новий ключ після кожного кліку: детектор не повертає попередній клік
    clicked_id = click_detector(renderer.generate_svg(), key=view.click_key())

    if clicked_id:
        view.on_member_click(clicked_id)
        st.rerun()


# --- 3. UI КОМПОНЕНТИ ---
def render_sidebar(dm: DataManager, view: TreeView):
    session = view.session
    selected = dm.tree.get(session.selected_id)

    st.sidebar.title("🌳 Сімейний граф")
    stats = dm.tree.summary()
    st.sidebar.caption(f"Людей: {stats['members']} · Коренів: {stats['roots']} · Пар: {stats['couples']}")
    if session.is_zoomed:
        st.sidebar.info("🔍 Режим фокусу. Натисніть на головну людину пари, щоб повернутись.")

    if selected is None:
        st.sidebar.info("👈 Клікніть на людину в дереві.")
        return

    st.sidebar.markdown(f"### ✏️ {selected.name}")
    if st.sidebar.button("🔍 Фокус на парі"):
        if not view.request_zoom():
            st.sidebar.info("Фокус доступний лише для партнерів та доданих батьків.")
        else:
            st.rerun()

    with st.sidebar.form("rename_form"):
        new_name = st.text_input("Ім'я", selected.name)
        if st.form_submit_button("Перейменувати"):
            report(dm.rename(selected.id, new_name), "Збережено")
            save_state(dm)

    with st.sidebar.form("add_relative_form"):
        st.write("➕ **Додати родича**")
        name = st.text_input("Ім'я нової людини")
        gender = st.radio("Стать", list(GENDER_LABELS), horizontal=True)
        kind = st.selectbox("Зв'язок", ["Дитина", "Партнер", "Батько/Мати"])
        if st.form_submit_button("Додати") and name:
            g = GENDER_LABELS[gender]
            if kind == "Дитина":
                report(dm.add_child(selected.id, name, g), "Дитину додано")
            elif kind == "Партнер":
                report(dm.add_spouse(selected.id, name, g), "Партнера додано")
            else:
                report(dm.add_parent(selected.id, name, g), "Батьків додано")
            save_state(dm)

    if st.session_state.get('last_error'):
        st.sidebar.warning(st.session_state.pop('last_error'))

    with st.sidebar.expander("📜 Історія змін", expanded=False):
        logs = dm.logger.get_recent_logs(10)
        if not logs:
            st.write("Історія порожня.")
        for timestamp, user, action, details in logs:
            st.markdown(f"**{action}** ({user})")
            st.caption(f"{details} | {timestamp}")

    if len(dm.tree) == 1 and st.sidebar.button("🛠 Тестові дані"):
        dm.create_test_data()
        view.set_tree(dm.tree)
        st.rerun()


# --- 4. ГОЛОВНИЙ ЗАПУСК ---
def main():
    username = _secret('username', 'local')
    dm = get_data_manager(username)
    view = get_tree_view(dm)

    render_sidebar(dm, view)
    st.subheader("📊 Генеалогічне дерево")
    render_graph(dm, view)


if __name__ == "__main__":
    main()
