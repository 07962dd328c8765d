from .auth_schemas import (
    RegisterRequest,
    LoginRequest,
    CustomerOut,
    CustomerProfile,
    CustomerProfileUpdate,
    CustomerAuthResponse,
    BusinessUserOut,
    BusinessAuthResponse,
)
