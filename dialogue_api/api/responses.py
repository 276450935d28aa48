from fastapi.responses import JSONResponse


def error_response(error: Exception) -> JSONResponse:
    """Ответ 500 с текстом ошибки, единый формат для всех маршрутов"""
    return JSONResponse(status_code=500, content={"error": str(error)})
