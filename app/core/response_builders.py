from fastapi import HTTPException
from app.core.enums import ErrorKind
from app.core.results import StoreResult

STATUS_BY_KIND = {
    ErrorKind.CONFLICT: 409,
    ErrorKind.VALIDATION_ERROR: 422,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.TRANSIENT_FAILURE: 503,
}


def raise_for_result(result: StoreResult) -> StoreResult:
    if not result.ok:
        raise HTTPException(
            status_code=STATUS_BY_KIND.get(result.kind, 503),
            detail=result.message,
        )
    return result


def build_mutation_response(result: StoreResult) -> dict:
    raise_for_result(result)
    body = {"ok": True, "message": result.message}
    if result.value is not None:
        body["data"] = result.value.model_dump() if hasattr(result.value, "model_dump") else result.value
    return body
