"""
Middleware components for the contact point service.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from .error_handlers import (
    contact_point_exception_handler,
    general_exception_handler,
    register_contact_point_error_handlers,
)

__all__ = [
    "contact_point_exception_handler",
    "general_exception_handler",
    "register_contact_point_error_handlers",
]
