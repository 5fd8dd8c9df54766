"""User form validation; runs before any request leaves the client"""
MIN_PASSWORD_LENGTH = 6
ROLES = ('superadmin', 'user')


class FormValidationError(Exception):
    def __init__(self, errors):
        super().__init__(', '.join(errors.values()))
        self.errors = errors


def validate_user_form(data, editing=False):
    """Return {field: message}; empty when the form can be submitted"""
    errors = {}
    if not str(data.get('name') or '').strip():
        errors['name'] = 'Name is required'
    if not str(data.get('username') or '').strip():
        errors['username'] = 'Username is required'
    role = data.get('role')
    if not role:
        errors['role'] = 'Role is required'
    elif role not in ROLES:
        errors['role'] = 'Invalid role'

    password = data.get('password') or ''
    if not editing and not password:
        errors['password'] = 'Password is required'
    elif password and len(password) < MIN_PASSWORD_LENGTH:
        errors['password'] = f'Password must be at least {MIN_PASSWORD_LENGTH} characters'
    return errors


def submit_user_form(client, data, user_id=None):
    """Validate, then create (no user_id) or update the user. Blank passwords are not sent on edit."""
    editing = user_id is not None
    errors = validate_user_form(data, editing=editing)
    if errors:
        raise FormValidationError(errors)

    payload = {key: value for key, value in data.items() if value is not None}
    if editing and not payload.get('password'):
        payload.pop('password', None)
    if editing:
        return client.update('users', user_id, payload, partial=True)
    return client.create('users', payload)
