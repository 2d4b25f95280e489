from __future__ import annotations  # Report pipeline failure taxonomy


class PipelineFatalError(RuntimeError):  # Run aborted; no report is considered to exist
    pass


class LookupFailedError(PipelineFatalError):  # Candidate or interview could not be read
    pass


class GenerationFailedError(PipelineFatalError):  # Both providers exhausted, or the only one failed
    def __init__(self, message: str, provider_used: str | None = None) -> None:
        super().__init__(message)
        self.provider_used = provider_used


class ResultInsertError(PipelineFatalError):  # Primary result write failed; nothing else was attempted
    pass


class CandidateStatusUpdateError(PipelineFatalError):  # Result row exists but the candidate is not marked Completed
    def __init__(self, message: str, result_id: int) -> None:
        super().__init__(message)
        self.result_id = result_id


class PipelineDegradedWarning(Warning):  # Best-effort step failed; run still succeeded
    def __init__(self, step: str, message: str) -> None:
        super().__init__(f"{step}: {message}")
        self.step = step
        self.message = message


__all__ = [
    "CandidateStatusUpdateError",
    "GenerationFailedError",
    "LookupFailedError",
    "PipelineDegradedWarning",
    "PipelineFatalError",
    "ResultInsertError",
]
