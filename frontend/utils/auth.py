import streamlit as st
from typing import Optional, Dict, Any
from utils.api_client import api_client, session_expired


def init_session_state():
    """Initialize session state variables."""
    if "authenticated" not in st.session_state:
        st.session_state.authenticated = False
    if "access_token" not in st.session_state:
        st.session_state.access_token = None
    if "user_info" not in st.session_state:
        st.session_state.user_info = None
    
    # Streamlit reruns the script on every interaction; the client must follow the session
    if st.session_state.access_token:
        api_client.set_auth_token(st.session_state.access_token)
    else:
        api_client.clear_auth_token()


def _store_session(data: Dict[str, Any]):
    st.session_state.authenticated = True
    st.session_state.access_token = data["token"]
    st.session_state.user_info = data["user"]
    api_client.set_auth_token(data["token"])


def login(email: str, password: str) -> bool:
    """Attempt to log in the user."""
    response = api_client.login(email, password)
    
    if response["success"]:
        _store_session(response["data"])
        return True
    else:
        st.error(f"Login failed: {response['error']}")
        return False


def signup(name: str, email: str, password: str) -> bool:
    """Register and log in in one step."""
    response = api_client.signup(name, email, password)
    
    if response["success"]:
        _store_session(response["data"])
        return True
    else:
        st.error(f"Sign up failed: {response['error']}")
        return False


def logout():
    """Log out the current user."""
    st.session_state.authenticated = False
    st.session_state.access_token = None
    st.session_state.user_info = None
    
    # Clear API client token
    api_client.clear_auth_token()


def require_auth():
    """Stop rendering the page and show the login form unless a user is logged in."""
    if not st.session_state.authenticated:
        st.warning("Please log in to access this page.")
        show_login_form()
        st.stop()


def show_login_form():
    """Display the login form."""
    st.subheader("Login")
    
    with st.form("login_form"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submit = st.form_submit_button("Login")
        
        if submit:
            if email and password:
                if login(email, password):
                    st.success("Login successful!")
                    st.rerun()
            else:
                st.error("Please enter both email and password.")


def show_signup_form():
    """Display the sign up form."""
    st.subheader("Create an account")
    
    with st.form("signup_form"):
        name = st.text_input("Name")
        email = st.text_input("Email")
        password = st.text_input("Password", type="password", help="At least 6 characters")
        submit = st.form_submit_button("Sign up")
        
        if submit:
            if name and email and password:
                if signup(name, email, password):
                    st.success("Account created!")
                    st.rerun()
            else:
                st.error("Please fill in every field.")


def get_current_user() -> Optional[Dict[str, Any]]:
    """Get the current user information."""
    return st.session_state.user_info


def is_admin() -> bool:
    """Check if the current user is an admin."""
    user_info = get_current_user()
    return bool(user_info) and user_info.get("role") == "admin"


def check_api_response(response: Dict[str, Any]) -> bool:
    """Check API response and handle authentication errors."""
    if not response["success"]:
        if session_expired(response):
            logout()
            st.error("Session expired. Please log in again.")
            st.rerun()
        else:
            st.error(f"API Error: {response['error']}")
    
    return response["success"]
