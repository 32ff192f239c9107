"""JavaScript execution in the browser context."""

from logtap.app import app
from logtap.commands._errors import LogtapError, check_connection, error_response
from logtap.commands._utils import build_code_response


@app.command(display="markdown", fastmcp={"type": "tool", "mime_type": "text/markdown"})
def evaluate_js(state, code: str, context: str = "") -> dict:
    """Execute JavaScript in the connected page and return the raw result.

    Args:
        code: JavaScript expression to evaluate
        context: "console" to allow DevTools helpers ($, $$, copy, ...), empty for page (default)

    Examples:
        evaluate_js("document.title")
        evaluate_js("$$('a').length", context="console")

    Returns:
        Runtime.evaluate result; JavaScript errors appear under exceptionDetails
    """
    if error := check_connection(state):
        return error

    try:
        result = state.session.evaluate(code, context)
    except LogtapError as e:
        return error_response(e)

    if isinstance(result, dict) and (details := result.get("exceptionDetails")):
        exception = details.get("exception") or {}
        description = exception.get("description") or details.get("text")
        return error_response("custom", custom_message=f"JavaScript error: {description}")

    return build_code_response("Evaluation Result", result)


@app.command(display="markdown", fastmcp={"type": "tool", "mime_type": "text/markdown"})
def browser_info(state) -> dict:
    """Get browser information (user agent)."""
    if error := check_connection(state):
        return error

    try:
        result = state.session.browser_info()
    except LogtapError as e:
        return error_response(e)

    return build_code_response("Browser Info", result)
