from __future__ import annotations


class WorkbookImportError(ValueError):
    """Base for every failure raised by the workbook importer."""


class WorkbookValidationError(WorkbookImportError):
    """Pre-flight rejection: the workbook is refused before any rows are read."""


class FileTooLargeError(WorkbookValidationError):
    def __init__(self, limit_bytes: int):
        self.limit_bytes = limit_bytes
        super().__init__(f"File size exceeds {limit_bytes // (1024 * 1024)}MB limit")


class BadExtensionError(WorkbookValidationError):
    def __init__(self, file_name: str):
        self.file_name = file_name
        super().__init__("Invalid file type. Please upload an Excel file (.xlsx or .xls)")


class WorkbookParseError(WorkbookImportError):
    def __init__(self):
        super().__init__(
            "Failed to read Excel file. The file may be corrupted or in an unsupported format."
        )


class TooManySheetsError(WorkbookValidationError):
    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"Too many sheets. Maximum allowed is {limit}")
