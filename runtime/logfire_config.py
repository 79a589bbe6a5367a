from __future__ import annotations

import logfire

_configured = False


def configure_logfire(service_name: str = "castle-api") -> None:
    """
    Configure logfire once per process.

    Data is only sent when a LOGFIRE_TOKEN is present, so local runs and
    tests stay offline.
    """
    global _configured
    if _configured:
        return
    logfire.configure(service_name=service_name, send_to_logfire="if-token-present", console=False)
    _configured = True
