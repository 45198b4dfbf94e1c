"""
Main Streamlit application for the tunnel control panel.
Edits tunnel, server and DNS configuration objects with the schema-less object
editor; the page owns persistence and writes saved objects to JSON files.
"""

import copy
import json
import streamlit as st
from pathlib import Path
import logging
from typing import Any, Dict

from object_editor.editor import ObjectEditor
from object_editor.editor_config import build_options, get_config_value, load_config
from object_editor.editor_session import EditorSession
from object_editor.error_handler import ErrorHandler, ErrorType
from object_editor.events import MutationChannel
from object_editor.streamlit_renderer import StreamlitRenderer


def get_logging_level(level_str):
    """Map string logging level to logging constant."""
    level_map = {
        'DEBUG': logging.DEBUG,
        'INFO': logging.INFO,
        'WARNING': logging.WARNING,
        'ERROR': logging.ERROR,
        'CRITICAL': logging.CRITICAL
    }
    return level_map.get(str(level_str).upper(), logging.INFO)

# Configure logging dynamically from config
try:
    log_level_str = get_config_value('logging', 'level', 'INFO')
    logging.basicConfig(level=get_logging_level(log_level_str))
    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured to level: {log_level_str}")
except Exception as e:
    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger(__name__)
    logger.error(f"Failed to configure logging from config: {e}, using INFO level")

config = load_config()
page_title = get_config_value('ui', 'page_title', 'Tunnel Control Panel', config=config)
DATA_DIR = Path(get_config_value('storage', 'data_dir', 'data', config=config))

st.set_page_config(
    page_title=page_title,
    page_icon="🛡️",
    layout="wide",
    initial_sidebar_state="expanded"
)

SAMPLE_OBJECTS: Dict[str, Any] = {
    'tunnel': {
        "_id": "65f1c0a2e4b0a1b2c3d4e5f6",
        "Tag": "office",
        "IFName": "tun-office",
        "IPv4Address": "10.4.3.2",
        "MTU": None,
        "EnableDefaultRoute": False,
        "AutoConnect": True,
        "DNSServers": ["9.9.9.9"],
        "Networks": [
            {
                "Tag": "lan",
                "Network": "192.168.1.0/24",
                "Nat": "",
                "Routes": [{"Address": "0.0.0.0/0", "Metric": "0"}]
            }
        ],
        "DNS": {
            "Blocking": True,
            "Records": [{"Domain": "printer.lan", "IP": ["192.168.1.40"], "TXT": []}]
        }
    },
    'server': {
        "_id": "65f1c0a2e4b0a1b2c3d4e5aa",
        "Tag": "fra-1",
        "Country": "DE",
        "IP": "203.0.113.10",
        "Port": 444,
        "DataPort": 443,
        "Admin": "65f1c0a2e4b0a1b2c3d4e500",
        "OrgID": "000000000000000000000000",
        "Public": True
    },
    'dns': {
        "Records": [
            {"Domain": "nas.home", "Wildcard": False, "IP": ["10.0.0.5"], "TXT": ["v=home"]},
        ],
        "Blocklists": ["https://example.org/ads.txt"]
    },
}

PAGES = {
    'tunnel': "🚇 Tunnel",
    'server': "🖥️ Server",
    'dns': "🌐 DNS",
}


def data_file(page_id: str) -> Path:
    return DATA_DIR / f"{page_id}.json"


def load_page_object(page_id: str) -> Any:
    """Load the saved object for a page, or its sample when nothing was saved."""
    path = data_file(page_id)
    if path.exists():
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    return copy.deepcopy(SAMPLE_OBJECTS[page_id])


def save_page_object(session: EditorSession, obj: Any) -> None:
    """Write the edited object to its JSON file."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    path = data_file(session.page_id)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(obj, f, indent=2)
    session.mark_saved()
    logger.info(f"Saved {session.page_id} to {path}")
    st.toast(f"Saved {path.name}")


def delete_page_object(session: EditorSession, obj: Any) -> None:
    """Remove the saved file and start over from the sample."""
    path = data_file(session.page_id)
    if path.exists():
        path.unlink()
        logger.info(f"Deleted {path}")
    session.load(copy.deepcopy(SAMPLE_OBJECTS[session.page_id]))


def discard_changes(session: EditorSession) -> None:
    session.load(load_page_object(session.page_id))


def new_route(routes: list) -> None:
    routes.append({"Address": "", "Metric": "0"})


def new_network(networks: list) -> None:
    networks.append({"Tag": "", "Network": "", "Nat": "", "Routes": []})


def new_dns_record(records: list) -> None:
    records.append({"Domain": "", "Wildcard": False, "IP": [], "TXT": []})


def page_callables(page_id: str, session: EditorSession) -> Dict[str, Any]:
    """Options that cannot be expressed in config.yaml."""
    callables: Dict[str, Any] = {
        'backButton': {'title': "Discard changes", 'func': lambda: discard_changes(session)},
        'saveButton': {'title': "Save", 'func': lambda obj: save_page_object(session, obj)},
        'deleteButton': {'title': "Reset to sample", 'func': lambda obj: delete_page_object(session, obj)},
    }
    if page_id == 'tunnel':
        callables['newButtons'] = {
            'root_Networks': new_network,
            'root_Networks_Routes': new_route,
            'root_DNS_Records': new_dns_record,
        }
    elif page_id == 'dns':
        callables['newButtons'] = {'root_Records': new_dns_record}
    return callables


def render_sidebar() -> str:
    """Render navigation and return the selected page id."""
    st.sidebar.title(get_config_value('ui', 'sidebar_title', 'Navigation', config=config))
    return st.sidebar.radio(
        "Page",
        options=list(PAGES),
        format_func=lambda page_id: PAGES[page_id],
        key="current_page",
    )


def render_editor_page(page_id: str) -> None:
    """Render one editor page and its pending changes."""
    session = EditorSession(page_id)
    session.initialize(lambda: load_page_object(page_id))

    channel = MutationChannel()
    session.attach(channel)

    options = build_options(page_id, config, **page_callables(page_id, session))
    obj = session.get_object()

    st.header(PAGES[page_id])
    if isinstance(obj, dict) and obj.get('Tag'):
        st.caption(f"Editing {obj['Tag']}")

    view = ObjectEditor(obj, options, channel).render()
    renderer = StreamlitRenderer(page_id)
    renderer.render(view)
    renderer.render_changes(session.changes())


def main():
    """Main application entry point."""
    try:
        page_id = render_sidebar()
        render_editor_page(page_id)
    except Exception as e:
        ErrorHandler.handle_error(e, "rendering page", ErrorType.SYSTEM, show_details=True)


if __name__ == "__main__":
    main()
