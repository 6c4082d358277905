import json
from typing import Callable, Type
from pydantic import BaseModel, ValidationError
from aiohttp import web

__all__ = ["validate_request"]


def validate_request(schema: Type[BaseModel]) -> Callable:
    """Validate the JSON body against schema. The parsed model is stored in request["data"]"""

    def decorator(handler):
        async def wrapper(request):
            try:
                data = await request.json() if request.can_read_body else {}
                request["data"] = schema.model_validate(data)
            except json.JSONDecodeError:
                return web.json_response({"error": "Invalid JSON body"}, status=400)
            except (ValidationError, ValueError) as e:
                errors = _format_errors(e, schema)
                return web.json_response({"error": errors}, status=400)

            return await handler(request)

        return wrapper

    return decorator


def _format_errors(e: Exception, schema: Type[BaseModel]) -> str:
    if isinstance(e, ValidationError):
        errors = []

        for err in e.errors():
            field_id = str(err["loc"][0]) if err["loc"] else None

            if field_id:
                field = schema.model_fields.get(field_id, None)

                if not field:
                    # error locations use the alias when the field has one
                    field = next((f for f in schema.model_fields.values() if f.alias == field_id), None)

                title = field.title or field_id if field else field_id

                errors.append(f"{title}: {err['msg']}")
            else:
                errors.append(err["msg"])
    else:
        errors = [str(e)]

    return ", ".join(errors)
