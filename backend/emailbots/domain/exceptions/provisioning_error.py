"""
ProvisioningError - The assistant provider rejected or failed a request.
Never surfaced from bot creation; provisioning is best-effort.
"""


class ProvisioningError(Exception):
    code = "provisioning_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
