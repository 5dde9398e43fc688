from .auth_api import router as auth_api_router
from .employees_api import router as employees_api_router
from .laptops_api import router as laptops_api_router
from .laptops_ui import router as laptops_ui_router

API_ROUTERS = (
    laptops_api_router,
    employees_api_router,
    auth_api_router,
)

UI_ROUTERS = (
    laptops_ui_router,
)
