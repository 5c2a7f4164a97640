import time
from rest_framework.renderers import JSONRenderer

class CustomJSONRenderer(JSONRenderer):
    """
    Wraps successful responses into the standard envelope
    ``{success, code, message, timestamp, data}``. Error responses are already
    shaped by ``custom_exception_handler`` and pass through untouched.
    """
    def render(self, data, accepted_media_type=None, renderer_context=None):
        response = (renderer_context or {}).get('response')
        if response is None:
            return super().render(data, accepted_media_type, renderer_context)
        status_code = response.status_code
        if status_code == 204:
            return b""

        if isinstance(data, dict) and 'success' in data or not (200 <= status_code < 300):
            return super().render(data, accepted_media_type, renderer_context)

        message = "Operation successful."
        if status_code == 201:
            message = "Resource created successfully."

        response_data = {
            "success": True,
            "code": status_code,
            "message": message,
            "timestamp": int(time.time()),
            "data": data
        }

        return super().render(response_data, accepted_media_type, renderer_context)
