"""错误响应 -- 统一的 {error: {code, message}} 信封"""

from starlette.responses import JSONResponse


def error_response(
    status_code: int,
    code: str,
    message: str,
    details: list[dict] | None = None,
) -> JSONResponse:
    error: dict = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return JSONResponse(status_code=status_code, content={"error": error})


def project_not_found(project_id: str) -> JSONResponse:
    return error_response(
        404,
        "PROJECT_NOT_FOUND",
        f"Project with id {project_id} does not exist",
    )


def task_not_found(task_id: str) -> JSONResponse:
    return error_response(404, "TASK_NOT_FOUND", f"Task with id {task_id} does not exist")


def risk_not_found(risk_id: str) -> JSONResponse:
    return error_response(404, "RISK_NOT_FOUND", f"Risk with id {risk_id} does not exist")
