from __future__ import annotations

import json
import os
from typing import Any, Dict, Optional


def load_session(path: str, debug_logging: bool = False) -> Dict[str, Any]:
    try:
        with open(path, 'r') as file:
            data = json.load(file)
            return data if isinstance(data, dict) else {}
    except (FileNotFoundError, json.JSONDecodeError):
        if debug_logging:
            import logging
            logging.warning("Session file not found or is invalid. Starting without a session id.")
        return {}


def save_session(data: Dict[str, Any], path: str) -> None:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    tmp_path = path + '.tmp'
    with open(tmp_path, 'w') as file:
        json.dump(data, file, indent=4)
    os.replace(tmp_path, path)


def session_id_for(data: Dict[str, Any], url: str) -> Optional[str]:
    # A token is only valid for the daemon that issued it
    if not isinstance(data, dict) or data.get('url') != url:
        return None
    sid = data.get('session_id')
    return str(sid) if sid else None


def make_session_record(url: str, session_id: Optional[str]) -> Dict[str, Any]:
    return {"url": url, "session_id": session_id}
