import requests
from typing import Dict, Any, Optional
from config import API_BASE_URL

# The 403 message the backend uses for a bad or expired token, as opposed to a role denial
INVALID_TOKEN_ERROR = "Invalid or expired token"


def session_expired(response: Dict[str, Any]) -> bool:
    """True when a handled response means the stored token can no longer be used."""
    if response.get("success"):
        return False
    status_code = response.get("status_code")
    return status_code == 401 or (status_code == 403 and response.get("error") == INVALID_TOKEN_ERROR)


class APIClient:
    """Client for communicating with the backend API."""
    
    def __init__(self, base_url: str = API_BASE_URL, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        
        # Set default headers
        self.session.headers.update({
            "Content-Type": "application/json"
        })
    
    def set_auth_token(self, token: str):
        """Set the authorization token for API requests."""
        self.session.headers.update({
            "Authorization": f"Bearer {token}"
        })
    
    def clear_auth_token(self):
        """Clear the authorization token."""
        if "Authorization" in self.session.headers:
            del self.session.headers["Authorization"]
    
    def has_auth_token(self) -> bool:
        return "Authorization" in self.session.headers
    
    # Auth
    
    def signup(self, name: str, email: str, password: str) -> Dict[str, Any]:
        """Register a new account."""
        response = self.session.post(
            f"{self.base_url}/auth/signup",
            json={"name": name, "email": email, "password": password}
        )
        return self._handle_response(response)
    
    def login(self, email: str, password: str) -> Dict[str, Any]:
        """Authenticate user and get a token."""
        response = self.session.post(
            f"{self.base_url}/auth/login",
            json={"email": email, "password": password}
        )
        return self._handle_response(response)
    
    def get_user_info(self) -> Dict[str, Any]:
        """Get current user information."""
        response = self.session.get(f"{self.base_url}/auth/me")
        return self._handle_response(response)
    
    # Profile
    
    def get_profile(self) -> Dict[str, Any]:
        response = self.session.get(f"{self.base_url}/users/profile")
        return self._handle_response(response)
    
    def update_profile(self, profile_data: Dict[str, Any]) -> Dict[str, Any]:
        response = self.session.put(f"{self.base_url}/users/profile", json=profile_data)
        return self._handle_response(response)
    
    def delete_account(self) -> Dict[str, Any]:
        response = self.session.delete(f"{self.base_url}/users/profile")
        return self._handle_response(response)
    
    # Trips
    
    def get_trips(self) -> Dict[str, Any]:
        """Get the caller's trips."""
        response = self.session.get(f"{self.base_url}/trips")
        return self._handle_response(response)
    
    def get_trip(self, trip_id: int) -> Dict[str, Any]:
        response = self.session.get(f"{self.base_url}/trips/{trip_id}")
        return self._handle_response(response)
    
    def create_trip(self, trip_data: Dict[str, Any]) -> Dict[str, Any]:
        response = self.session.post(f"{self.base_url}/trips", json=trip_data)
        return self._handle_response(response)
    
    def update_trip(self, trip_id: int, trip_data: Dict[str, Any]) -> Dict[str, Any]:
        response = self.session.put(f"{self.base_url}/trips/{trip_id}", json=trip_data)
        return self._handle_response(response)
    
    def delete_trip(self, trip_id: int) -> Dict[str, Any]:
        response = self.session.delete(f"{self.base_url}/trips/{trip_id}")
        return self._handle_response(response)
    
    def add_city_to_trip(self, trip_id: int, city_data: Dict[str, Any]) -> Dict[str, Any]:
        response = self.session.post(f"{self.base_url}/trips/{trip_id}/cities", json=city_data)
        return self._handle_response(response)
    
    def remove_city_from_trip(self, trip_id: int, city_id: int) -> Dict[str, Any]:
        response = self.session.delete(f"{self.base_url}/trips/{trip_id}/cities/{city_id}")
        return self._handle_response(response)
    
    def add_activity_to_trip(self, trip_id: int, activity_data: Dict[str, Any]) -> Dict[str, Any]:
        response = self.session.post(f"{self.base_url}/trips/{trip_id}/activities", json=activity_data)
        return self._handle_response(response)
    
    def remove_activity_from_trip(self, trip_id: int, activity_id: int) -> Dict[str, Any]:
        response = self.session.delete(f"{self.base_url}/trips/{trip_id}/activities/{activity_id}")
        return self._handle_response(response)
    
    def remove_booking(self, trip_id: int, booking_id: int) -> Dict[str, Any]:
        """Remove one booking by id; works for bookings whose activity was deleted."""
        response = self.session.delete(f"{self.base_url}/trips/{trip_id}/bookings/{booking_id}")
        return self._handle_response(response)
    
    def update_budget(self, trip_id: int, budget: Dict[str, float]) -> Dict[str, Any]:
        """Replace the trip budget; the server derives the total."""
        response = self.session.put(f"{self.base_url}/trips/{trip_id}/budget", json=budget)
        return self._handle_response(response)
    
    def share_trip(self, trip_id: int) -> Dict[str, Any]:
        response = self.session.post(f"{self.base_url}/trips/{trip_id}/share")
        return self._handle_response(response)
    
    def get_shared_trip(self, token: str) -> Dict[str, Any]:
        response = self.session.get(f"{self.base_url}/shared/{token}")
        return self._handle_response(response)
    
    # Reference data
    
    def get_cities(self, **filters) -> Dict[str, Any]:
        """List cities; filters: country, cost_index, tags, search."""
        params = {k: v for k, v in filters.items() if v not in (None, "")}
        response = self.session.get(f"{self.base_url}/cities", params=params)
        return self._handle_response(response)
    
    def get_city(self, city_id: int) -> Dict[str, Any]:
        response = self.session.get(f"{self.base_url}/cities/{city_id}")
        return self._handle_response(response)
    
    def get_activities(self, **filters) -> Dict[str, Any]:
        """List activities; filters: city_id, type, min_cost, max_cost, search."""
        params = {k: v for k, v in filters.items() if v not in (None, "")}
        response = self.session.get(f"{self.base_url}/activities", params=params)
        return self._handle_response(response)
    
    def get_recommendations(self) -> Dict[str, Any]:
        response = self.session.get(f"{self.base_url}/recommendations/destinations")
        return self._handle_response(response)
    
    # Admin
    
    def get_admin_stats(self) -> Dict[str, Any]:
        response = self.session.get(f"{self.base_url}/admin/stats")
        return self._handle_response(response)
    
    def get_health(self) -> Dict[str, Any]:
        """Get API health status."""
        response = self.session.get(f"{self.base_url}/health")
        return self._handle_response(response)
    
    def _handle_response(self, response) -> Dict[str, Any]:
        """Handle API response and return JSON data or error."""
        try:
            data = response.json()
        except ValueError:
            data = {"error": "Invalid JSON response"}
        
        if response.status_code >= 400:
            error_msg = data.get("error", f"HTTP {response.status_code}") if isinstance(data, dict) else f"HTTP {response.status_code}"
            return {"success": False, "error": error_msg, "status_code": response.status_code}
        
        return {"success": True, "data": data, "status_code": response.status_code}


# Global API client instance
api_client = APIClient()
