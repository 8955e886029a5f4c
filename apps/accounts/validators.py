import re

from django.core.exceptions import ValidationError


class CharacterClassValidator:
    """
    Require upper case, lower case, digit and special characters.

    Registered in AUTH_PASSWORD_VALIDATORS next to Django's built-in ones.
    """

    rules = [
        (r'[A-Z]', 'Password must contain at least one uppercase letter.'),
        (r'[a-z]', 'Password must contain at least one lowercase letter.'),
        (r'\d', 'Password must contain at least one digit.'),
        (r'[!@#$%^&*(),.?":{}|<>]', 'Password must contain at least one special character.'),
    ]

    def validate(self, password, user=None):
        errors = [
            ValidationError(message, code='password_character_class')
            for pattern, message in self.rules
            if not re.search(pattern, password)
        ]
        if errors:
            raise ValidationError(errors)

    def get_help_text(self):
        return (
            'Your password must contain an uppercase letter, a lowercase letter, '
            'a digit and a special character.'
        )
