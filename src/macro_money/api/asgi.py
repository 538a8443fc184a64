"""ASGI entrypoint for the MacroMoney API."""

from macro_money.api.app import create_app
from macro_money.containers import build_container

app = create_app(build_container())
