from typing import Any, Callable, Dict, Optional

def success_response(data: Any = None, message: str = "Success", status_code: int = 200):
    """Standard success response format for Flask-RESTful"""
    response = {
        "success": True,
        "message": message,
        "data": data
    }
    return response, status_code

def error_response(message: str = "Error", status_code: int = 400, details: Optional[Dict] = None):
    """Standard error response format for Flask-RESTful"""
    response = {
        "success": False,
        "error": {
            "message": message,
            "code": status_code,
            "details": details or {}
        }
    }
    return response, status_code

def konnect_error_response(error):
    """Error response for a KonnectError raised by the service layer"""
    return error_response(error.message, error.status_code, error.details)

def paginated_response(pagination, serialize: Callable[[Any], Dict], message: str = "Success", **kwargs):
    """Paginated response for a Flask-SQLAlchemy Pagination object"""
    response = {
        "success": True,
        "message": message,
        "data": [serialize(item) for item in pagination.items],
        "pagination": {
            "total": pagination.total,
            "page": pagination.page,
            "per_page": pagination.per_page,
            "pages": pagination.pages
        },
        **kwargs
    }
    return response, 200
