"""Using the service layer directly, without Flask.

Prints the current overtime-bank snapshot of one agent.
"""

import importlib
import json
import sys

from dotenv import load_dotenv

from config import get_settings_module

from src.overtime_bank.overtime_bank.container import build_container


def main(agent_id: str) -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    snapshot = container.ledger_service.snapshot(agent_id)
    print(json.dumps(snapshot.as_dict(), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main(sys.argv[1] if len(sys.argv) > 1 else "00000000-0000-0000-0000-000000000001")
