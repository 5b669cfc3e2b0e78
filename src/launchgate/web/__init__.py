from launchgate.web.cookies import CookiePersistence
from launchgate.web.session_controller import NavigationState, WebSessionController
from launchgate.web.web_view import RequestsWebView

__all__ = [
    "CookiePersistence",
    "NavigationState",
    "RequestsWebView",
    "WebSessionController",
]
