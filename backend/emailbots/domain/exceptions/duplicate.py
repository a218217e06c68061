"""
Uniqueness violations - Raised by the pre-insert check or remapped from a
Gateway constraint conflict.
Maps to: HTTP 409 Conflict
"""


class DuplicateEmailError(Exception):
    """Another bot already uses this email address."""

    code = "duplicate_email"

    def __init__(self, email_address: str):
        self.email_address = email_address
        self.message = f'A bot with the email address "{email_address}" already exists'
        super().__init__(self.message)


class DuplicateSourceError(Exception):
    """The knowledge-base source has already been added."""

    code = "duplicate_source"

    def __init__(self, source: str):
        self.source = source
        self.message = "This source has already been added to the knowledge base"
        super().__init__(self.message)
