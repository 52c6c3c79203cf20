"""Event logger used by the IRC transport and the dispatcher."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

TEMPLATES_FILE = Path(__file__).with_name("event_templates.json")
EVENT_DOMAINS = ("irc", "dispatch", "context")


def load_event_templates(path: Path = TEMPLATES_FILE) -> dict[tuple[str, str], str]:
    """Read the ``{domain: {action: template}}`` catalog.

    Only the known event domains are kept. A missing or broken file yields an
    empty catalog; events then fall back to derived text.
    """
    try:
        with path.open(encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, ValueError) as e:
        logging.getLogger("rustbot").warning(f"Event templates unavailable ({path}): {e}")
        return {}
    if not isinstance(raw, dict):
        return {}
    return {
        (domain, action): template
        for domain in EVENT_DOMAINS
        if isinstance(raw.get(domain), dict)
        for action, template in raw[domain].items()
        if isinstance(template, str)
    }


EVENT_TEMPLATES = load_event_templates()


class BotLogger:
    """Render structured events into single log lines.

    Events are addressed as ``(domain, action)``. The human readable text comes
    from the event template catalog; keyword fields fill the template and, in
    debug mode, are appended as ``key=value`` context.
    """

    def __init__(self, name: str = "rustbot") -> None:
        self._event_name_width = 28
        self.logger = logging.getLogger(name)

    def log_event(
        self,
        domain: str,
        action: str,
        level: int = logging.INFO,
        human: str | None = None,
        *,
        exc_info: bool = False,
        **kwargs: object,
    ) -> None:
        event_name = f"{domain}_{action}".lower()
        human_text = human
        if human_text is None:
            template = EVENT_TEMPLATES.get((domain, action))
            if template:
                try:
                    human_text = template.format(**kwargs)
                except (KeyError, IndexError, ValueError):
                    human_text = template
            else:
                human_text = f"{domain.replace('_', ' ')}: {action.replace('_', ' ')}"
                kwargs.setdefault("derived", True)
        self._log(level, event_name, human_text, exc_info=exc_info, **kwargs)

    def _log(
        self,
        level: int,
        event_name: str,
        human_text: str,
        exc_info: bool = False,
        **kwargs: object,
    ) -> None:
        kw: dict[str, object] = dict(kwargs)
        prefix = self._build_prefix(kw.pop("user", None), kw.pop("channel", None))
        if self._is_debug_enabled():
            msg = self._build_debug_message(event_name, prefix, human_text, kw)
        else:
            msg = f"{prefix} {human_text}"
        self.logger.log(level, msg, exc_info=exc_info)

    @staticmethod
    def _is_debug_enabled() -> bool:
        return os.environ.get("DEBUG", "false").lower() in ("true", "1", "yes")

    @staticmethod
    def _build_prefix(user: object, channel: object) -> str:
        user_label = user if isinstance(user, str) and user else "system"
        core = f"{user_label}@{channel}" if isinstance(channel, str) and channel else user_label
        return f"[{core.ljust(20)[:20]}]"

    def _build_debug_message(
        self,
        event_name: str,
        prefix: str,
        human_text: str,
        kwargs: dict[str, object],
    ) -> str:
        width = self._event_name_width
        if len(event_name) <= width:
            ev = event_name.ljust(width)
        else:
            ev = event_name[: width - 1] + "…"
        base = f"{ev} {prefix} {human_text}"
        context = ", ".join(f"{k}={v}" for k, v in kwargs.items())
        if context:
            base = f"{base} ({context})"
        return base


logger = BotLogger()
