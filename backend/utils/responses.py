from fastapi.responses import JSONResponse, Response


def error_response(message, status=400, headers=None):
    return JSONResponse(
        status_code=status,
        content={"error": message},
        headers=headers,
    )


def audio_response(content: bytes, filename: str, media_type="audio/mpeg"):
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
