import streamlit as st
from utils.auth import (
    init_session_state,
    logout,
    get_current_user,
    is_admin,
    check_api_response,
    show_login_form,
    show_signup_form,
)
from utils.api_client import api_client
from config import PAGE_TITLE, PAGE_ICON, LAYOUT

# Page configuration
st.set_page_config(
    page_title=PAGE_TITLE,
    page_icon=PAGE_ICON,
    layout=LAYOUT,
    initial_sidebar_state="expanded"
)

# Initialize session state
init_session_state()

# Sidebar
with st.sidebar:
    if st.session_state.authenticated:
        user_info = get_current_user()
        if user_info:
            st.markdown(f"### 👤 {user_info.get('name', 'Traveller')}")
            st.caption(f"{user_info.get('email', '')} · {user_info.get('role', 'user')}")
        
        if st.button("🚪 Logout", use_container_width=True):
            logout()
            st.rerun()
        
        st.markdown("---")
        
        health_response = api_client.get_health()
        if health_response.get("success"):
            st.success("🟢 API Online")
        else:
            st.error("🔴 API Offline")
    else:
        st.header("🔐 Welcome")
        st.info("Log in or create an account to start planning.")

# Main content
if st.session_state.authenticated:
    st.title("✈️ Travel Planner")
    
    trips_response = api_client.get_trips()
    if check_api_response(trips_response):
        trips = trips_response["data"]
        
        col1, col2, col3 = st.columns(3)
        col1.metric("Trips", len(trips))
        col2.metric("Cities planned", sum(len(trip["cities"]) for trip in trips))
        col3.metric("Total budget", f"{sum(trip['budget']['total'] for trip in trips):,.2f}")
        
        st.subheader("🧳 Upcoming trips")
        if trips:
            for trip in trips[:5]:
                st.markdown(f"**{trip['trip_name']}** · {trip['start_date']} → {trip['end_date']}")
        else:
            st.info("No trips yet. Head to **My Trips** to create one.")
    
    st.subheader("🌟 Recommended for you")
    rec_response = api_client.get_recommendations()
    if check_api_response(rec_response):
        cols = st.columns(3)
        for i, city in enumerate(rec_response["data"]):
            with cols[i % 3]:
                st.markdown(f"**{city['name']}**, {city['country']}")
                st.caption(", ".join(city.get("tags", [])))
    
    if is_admin():
        st.subheader("🛠️ Admin overview")
        stats_response = api_client.get_admin_stats()
        if check_api_response(stats_response):
            stats = stats_response["data"]
            col1, col2, col3, col4 = st.columns(4)
            col1.metric("Users", stats["total_users"])
            col2.metric("Trips", stats["total_trips"])
            col3.metric("Cities", stats["total_cities"])
            col4.metric("Trips (30 days)", stats["recent_trips"])
else:
    st.title("✈️ Travel Planner")
    login_tab, signup_tab = st.tabs(["Login", "Sign up"])
    with login_tab:
        show_login_form()
    with signup_tab:
        show_signup_form()
