class PdfToolsError(Exception):
    pass

class PdfPayloadError(PdfToolsError):
    """Tool arguments could not be decoded (bad base64, bad field_data)."""
    pass

class PdfDocumentError(PdfToolsError):
    """The bytes could not be opened as a PDF document."""
    pass

class PdfPasswordError(PdfDocumentError):
    pass
