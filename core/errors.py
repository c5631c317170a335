# core/errors.py
# Collaborator errors. Kept free of DRF imports: the store and identity
# backends load while DRF is still resolving its authentication classes.


class StoreError(Exception):
    """Any failure reported by the document store (including write denials)."""


class DocumentNotFound(StoreError):
    def __init__(self, collection, doc_id):
        self.collection = collection
        self.doc_id = doc_id
        super().__init__(f"{collection}/{doc_id} does not exist")


class IdentityError(Exception):
    """
    Raised by the identity provider (bad credentials, duplicate account,
    weak password). The message is shown to the user verbatim.
    """

    def __init__(self, message, code="identity_error"):
        self.message = message
        self.code = code
        super().__init__(message)
