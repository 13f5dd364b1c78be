from __future__ import annotations


class AnalysisError(RuntimeError):
    code = "analysis_error"
    status_code = 500

    def __init__(self, message: str, *, code: str | None = None, status_code: int | None = None):
        super().__init__(message)
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code


class ValidationFailed(AnalysisError):
    code = "validation_failed"
    status_code = 400


class UnsupportedFormat(AnalysisError):
    code = "unsupported_format"
    status_code = 400


class ExtractionFailed(AnalysisError):
    code = "extraction_failed"
    status_code = 400


class UploadTooLarge(AnalysisError):
    code = "upload_too_large"
    status_code = 413


class FetchFailed(AnalysisError):
    code = "fetch_failed"
    status_code = 502


class GenerationFailed(AnalysisError):
    code = "generation_failed"
    status_code = 500


class GenerationTimeout(GenerationFailed):
    code = "generation_timeout"
    status_code = 504


class UnparsableReply(AnalysisError):
    code = "unparsable_reply"
    status_code = 500

    def __init__(self, message: str, *, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text
