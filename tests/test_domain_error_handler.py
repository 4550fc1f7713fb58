"""Tests for domain error handler to verify structured JSON error responses."""
import json

import pytest
from fastapi.responses import JSONResponse

from app.core.error_handlers import (
    ERROR_STATUS_MAP,
    domain_error_handler,
    request_validation_error_handler,
)
from app.core.exceptions import (
    DomainError,
    NotFoundError,
    ValidationError,
    BusinessRuleError,
    ConflictError,
    AuthenticationError,
    AuthorizationError,
    IntegrationError,
    PasswordValidationError,
)


class MockRequest:
    """Mock FastAPI Request object for testing."""
    
    def __init__(self, request_id: str = "test-request-123"):
        self.state = type('State', (), {'request_id': request_id})()
        self.url = type('URL', (), {'path': '/test'})()


class TestDomainErrorExceptions:
    """Test domain exception classes and their error codes."""
    
    def test_domain_error_base(self):
        """Test base DomainError class."""
        error = DomainError(
            code="TEST_001",
            message="Test error message",
            details={"key": "value"}
        )
        
        assert error.code == "TEST_001"
        assert error.message == "Test error message"
        assert error.details == {"key": "value"}
        assert str(error) == "Test error message"
    
    def test_not_found_error(self):
        """Test NotFoundError generates correct error code."""
        error = NotFoundError("program", "Program not found", {"program_id": 123})
        
        assert error.code == "NF_PROGRAM_001"
        assert error.message == "Program not found"
        assert error.details == {"program_id": 123}
    
    def test_not_found_error_default_message(self):
        """Test NotFoundError generates default message when none provided."""
        error = NotFoundError("user")
        
        assert error.code == "NF_USER_001"
        assert error.message == "user not found"
        assert error.details == {}
    
    def test_validation_error(self):
        """Test ValidationError generates correct error code."""
        error = ValidationError("email", "Invalid email format")
        
        assert error.code == "VAL_EMAIL_001"
        assert error.message == "Validation failed for email: Invalid email format"
        assert error.details == {"field": "email"}
    
    def test_validation_error_with_details(self):
        """Test ValidationError with custom details."""
        error = ValidationError(
            "password",
            "Password too weak",
            {"min_length": 8, "actual_length": 4}
        )
        
        assert error.code == "VAL_PASSWORD_001"
        assert "Password too weak" in error.message
        assert error.details == {"min_length": 8, "actual_length": 4}
    
    def test_business_rule_error_default(self):
        """Test BusinessRuleError with default code."""
        error = BusinessRuleError("Cannot delete active program")
        
        assert error.code == "BR_001"
        assert error.message == "Cannot delete active program"
        assert error.details == {}
    
    def test_business_rule_error_custom_code(self):
        """Test BusinessRuleError with custom code."""
        error = BusinessRuleError(
            "Goal interference detected",
            code="BR_GOAL_INTERFERENCE",
            details={"goals": ["strength", "endurance"]}
        )
        
        assert error.code == "BR_GOAL_INTERFERENCE"
        assert error.message == "Goal interference detected"
        assert error.details == {"goals": ["strength", "endurance"]}
    
    def test_conflict_error_default(self):
        """Test ConflictError with default code."""
        error = ConflictError("Resource already exists")
        
        assert error.code == "CF_001"
        assert error.message == "Resource already exists"
        assert error.details == {}
    
    def test_conflict_error_custom(self):
        """Test ConflictError with custom code and details."""
        error = ConflictError(
            "Email already registered",
            code="CF_EMAIL_EXISTS",
            details={"email": "test@example.com"}
        )
        
        assert error.code == "CF_EMAIL_EXISTS"
        assert error.message == "Email already registered"
        assert error.details == {"email": "test@example.com"}
    
    def test_authentication_error_default(self):
        """Test AuthenticationError with default code."""
        error = AuthenticationError("Invalid credentials")
        
        assert error.code == "AUTH_001"
        assert error.message == "Invalid credentials"
        assert error.details == {}
    
    def test_authentication_error_custom(self):
        """Test AuthenticationError with custom code."""
        error = AuthenticationError(
            "Token expired",
            code="AUTH_TOKEN_EXPIRED",
            details={"expired_at": "2024-01-01T00:00:00Z"}
        )
        
        assert error.code == "AUTH_TOKEN_EXPIRED"
        assert error.message == "Token expired"
        assert error.details == {"expired_at": "2024-01-01T00:00:00Z"}
    
    def test_authorization_error_default(self):
        """Test AuthorizationError with default code."""
        error = AuthorizationError("Insufficient permissions")
        
        assert error.code == "AUTH_006"
        assert error.message == "Insufficient permissions"
        assert error.details == {}
    
    def test_authorization_error_custom(self):
        """Test AuthorizationError with custom details."""
        error = AuthorizationError(
            "Admin access required",
            code="AUTH_ADMIN_ONLY",
            details={"required_role": "admin", "user_role": "user"}
        )
        
        assert error.code == "AUTH_ADMIN_ONLY"
        assert error.message == "Admin access required"
        assert error.details == {"required_role": "admin", "user_role": "user"}


class TestErrorStatusMap:
    """Test ERROR_STATUS_MAP mapping."""
    
    def test_status_map_complete(self):
        """Verify all domain errors have status codes mapped."""
        assert NotFoundError in ERROR_STATUS_MAP
        assert ValidationError in ERROR_STATUS_MAP
        assert BusinessRuleError in ERROR_STATUS_MAP
        assert ConflictError in ERROR_STATUS_MAP
        assert AuthenticationError in ERROR_STATUS_MAP
        assert AuthorizationError in ERROR_STATUS_MAP
    
    def test_not_found_status(self):
        """Test NotFoundError maps to 404."""
        assert ERROR_STATUS_MAP[NotFoundError] == 404
    
    def test_validation_status(self):
        """Test ValidationError maps to 400."""
        assert ERROR_STATUS_MAP[ValidationError] == 400
    
    def test_business_rule_status(self):
        """Test BusinessRuleError maps to 422."""
        assert ERROR_STATUS_MAP[BusinessRuleError] == 422
    
    def test_conflict_status(self):
        """Test ConflictError maps to 409."""
        assert ERROR_STATUS_MAP[ConflictError] == 409
    
    def test_authentication_status(self):
        """Test AuthenticationError maps to 401."""
        assert ERROR_STATUS_MAP[AuthenticationError] == 401
    
    def test_authorization_status(self):
        """Test AuthorizationError maps to 403."""
        assert ERROR_STATUS_MAP[AuthorizationError] == 403

    def test_integration_status(self):
        """Test IntegrationError maps to 500."""
        assert ERROR_STATUS_MAP[IntegrationError] == 500

    def test_password_validation_status(self):
        """Test PasswordValidationError maps to 400."""
        assert ERROR_STATUS_MAP[PasswordValidationError] == 400


class TestDomainErrorHandler:
    """Test domain_error_handler function."""
    
    @pytest.mark.asyncio
    async def test_not_found_error_response(self):
        """Test NotFoundError returns 404 with structured JSON."""
        error = NotFoundError("program", "Program with ID 999 not found", {"program_id": 999})
        request = MockRequest(request_id="req-123")
        
        response = await domain_error_handler(request, error)
        
        assert isinstance(response, JSONResponse)
        assert response.status_code == 404
        
        data = json.loads(response.body.decode())
        
        assert data == {
            "error": "Program with ID 999 not found",
            "code": "NF_PROGRAM_001",
            "details": {"program_id": 999},
            "request_id": "req-123",
        }
    
    @pytest.mark.asyncio
    async def test_validation_error_response(self):
        """Test ValidationError returns 400 with structured JSON."""
        error = ValidationError("email", "Invalid email format")
        request = MockRequest(request_id="req-456")
        
        response = await domain_error_handler(request, error)
        
        assert response.status_code == 400
        
        data = json.loads(response.body.decode())
        assert data["code"] == "VAL_EMAIL_001"
        assert "Invalid email format" in data["error"]
        assert data["details"]["field"] == "email"
    
    @pytest.mark.asyncio
    async def test_business_rule_error_response(self):
        """Test BusinessRuleError returns 422 naming the offending workout."""
        error = BusinessRuleError(
            "Invalid sets for workout 12",
            code="BR_INVALID_PRESCRIPTION",
            details={"workout_id": 12, "field": "sets"}
        )
        request = MockRequest(request_id="req-789")
        
        response = await domain_error_handler(request, error)
        
        assert response.status_code == 422
        
        data = json.loads(response.body.decode())
        assert data["code"] == "BR_INVALID_PRESCRIPTION"
        assert data["details"] == {"workout_id": 12, "field": "sets"}
    
    @pytest.mark.asyncio
    async def test_conflict_error_response(self):
        """Test ConflictError returns 409 with structured JSON."""
        error = ConflictError(
            "Personalized plan already exists for this program; reset it first",
            code="CF_PLAN_ALREADY_PERSONALIZED",
            details={"program_id": 3}
        )
        
        response = await domain_error_handler(MockRequest(), error)
        
        assert response.status_code == 409
        data = json.loads(response.body.decode())
        assert data["code"] == "CF_PLAN_ALREADY_PERSONALIZED"
    
    @pytest.mark.asyncio
    async def test_authentication_error_response(self):
        """Test AuthenticationError returns 401 with structured JSON."""
        error = AuthenticationError("Invalid or expired token")
        
        response = await domain_error_handler(MockRequest(), error)
        
        assert response.status_code == 401
        data = json.loads(response.body.decode())
        assert data["code"] == "AUTH_001"
        assert data["error"] == "Invalid or expired token"
    
    @pytest.mark.asyncio
    async def test_integration_error_keeps_details_outside_production(self):
        """Test IntegrationError returns 500 and keeps raw text in test environment."""
        error = IntegrationError(
            "Invalid JSON from language model",
            code="INT_LLM_INVALID_JSON",
            details={"raw": "not json"}
        )
        
        response = await domain_error_handler(MockRequest(), error)
        
        assert response.status_code == 500
        data = json.loads(response.body.decode())
        assert data["details"] == {"raw": "not json"}
    
    @pytest.mark.asyncio
    async def test_integration_error_hides_details_in_production(self, monkeypatch):
        """Test IntegrationError drops upstream details in production."""
        from app.config.settings import Settings

        monkeypatch.setattr(
            "app.core.error_handlers.get_settings",
            lambda: Settings(environment="production"),
        )
        error = IntegrationError("Language model request failed", details={"reason": "timeout"})
        
        response = await domain_error_handler(MockRequest(), error)
        
        data = json.loads(response.body.decode())
        assert data["details"] == {}
    
    @pytest.mark.asyncio
    async def test_unknown_domain_error_returns_500(self):
        """Test unknown DomainError subclass returns 500."""
        
        class CustomDomainError(DomainError):
            """Custom domain error not in status map."""
            pass
        
        error = CustomDomainError("CUSTOM_001", "Custom error message")
        
        response = await domain_error_handler(MockRequest(), error)
        
        assert response.status_code == 500  # Default for unmapped errors
        data = json.loads(response.body.decode())
        assert data["code"] == "CUSTOM_001"
        assert data["error"] == "Custom error message"
    
    @pytest.mark.asyncio
    async def test_subclass_uses_parent_status(self):
        """Test a subclass of a mapped error inherits its status."""
        
        class ProfileMissing(NotFoundError):
            pass
        
        response = await domain_error_handler(MockRequest(), ProfileMissing("profile"))
        
        assert response.status_code == 404
    
    @pytest.mark.asyncio
    async def test_error_with_none_request_id(self):
        """Test error response when request has no request_id."""
        error = ValidationError("field", "Invalid field")
        
        request = type('Request', (), {
            'state': type('State', (), {})(),
            'url': type('URL', (), {'path': '/test'})(),
        })()
        
        response = await domain_error_handler(request, error)
        
        data = json.loads(response.body.decode())
        assert data["request_id"] is None


class TestRequestValidationErrorHandler:
    """Test request body validation errors map to 400."""
    
    @pytest.mark.asyncio
    async def test_request_validation_error(self):
        from fastapi.exceptions import RequestValidationError
        
        exc = RequestValidationError(
            [{"loc": ("body", "day"), "msg": "day must be one of: Monday", "type": "value_error"}]
        )
        
        response = await request_validation_error_handler(MockRequest(request_id="req-val"), exc)
        
        assert response.status_code == 400
        data = json.loads(response.body.decode())
        assert data["code"] == "VAL_REQUEST_001"
        assert data["details"]["errors"][0]["loc"] == ["body", "day"]
        assert data["request_id"] == "req-val"


class TestErrorResponseStructure:
    """Test that all error responses have consistent structure."""
    
    @pytest.mark.asyncio
    async def test_all_errors_have_consistent_structure(self):
        """Verify all domain error types return consistent response structure."""
        errors = [
            NotFoundError("test", "Not found"),
            ValidationError("field", "Validation failed"),
            BusinessRuleError("Business rule violation"),
            ConflictError("Conflict detected"),
            AuthenticationError("Authentication failed"),
            AuthorizationError("Authorization failed"),
            IntegrationError("Upstream failed"),
        ]
        
        request = MockRequest(request_id="test-req")
        
        for error in errors:
            response = await domain_error_handler(request, error)
            data = json.loads(response.body.decode())
            
            assert set(data) == {"error", "code", "details", "request_id"}
            assert isinstance(data["code"], str)
            assert isinstance(data["error"], str)
            assert isinstance(data["details"], dict)
            assert data["request_id"] == "test-req"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
