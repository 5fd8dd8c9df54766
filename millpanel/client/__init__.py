"""Python client for the MillPanel API, plus the list and form helpers the web UI is built on"""
from .api import PanelClient, PanelClientError, PanelAPIError
from .forms import FormValidationError, validate_user_form, submit_user_form
from .pages import Banner, ListPage

__all__ = [
    'PanelClient', 'PanelClientError', 'PanelAPIError',
    'FormValidationError', 'validate_user_form', 'submit_user_form',
    'Banner', 'ListPage',
]
