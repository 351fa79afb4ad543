import logging
import time
from typing import Optional


def setup_logger(name: str = "adb_api", level: str = "INFO") -> logging.Logger:
    """Setup standardized logger for the service with UTF-8 support."""
    logger = logging.getLogger(name)

    if not logger.handlers:  # Avoid duplicate handlers
        handler = logging.StreamHandler()
        if hasattr(handler.stream, 'reconfigure'):
            handler.stream.reconfigure(encoding='utf-8')

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return logger


def log_execution(logger: logging.Logger,
                  session_id: str,
                  tool: str,
                  arguments: Optional[dict],
                  success: bool,
                  duration_ms: float,
                  result_text: Optional[str] = None,
                  command: Optional[str] = None,
                  error: Optional[str] = None) -> None:
    """Log one tool call in a structured format."""

    log_data = {
        "session_id": session_id,
        "tool": tool,
        "arguments": _sanitize_arguments(arguments or {}),
        "success": success,
        "duration_ms": round(duration_ms, 1),
    }

    if command:
        log_data["command"] = command

    if result_text:
        log_data["result"] = _truncate(result_text.split("\n")[0], 100)

    if error:
        log_data["error"] = error

    status_icon = "✅" if success else "❌"
    tool_desc = tool.replace("_", " ").title()

    if error:
        logger.error(f"{status_icon} {tool_desc}: {log_data}")
    else:
        logger.info(f"{status_icon} {tool_desc}: {log_data}")


def _truncate(value: str, limit: int) -> str:
    if len(value) > limit:
        return value[:limit - 3] + "..."
    return value


def _sanitize_arguments(arguments: dict) -> dict:
    """Shorten long string arguments (typed text, custom commands) for logging."""
    sanitized = {}
    for key, value in arguments.items():
        if isinstance(value, str):
            sanitized[key] = _truncate(value, 200)
        else:
            sanitized[key] = value
    return sanitized


def create_session_id() -> str:
    """Create unique session ID for tracking."""
    return f"session_{int(time.time() * 1000)}"
