import logging
import os

import pandas as pd
import streamlit as st

from evplanner.config import Config
from evplanner.models.planner_models import PlanResult, TripRequest
from evplanner.models.vehicles import DEFAULT_VEHICLE, get_vehicle_profile, list_vehicles
from evplanner.optimization.trip_planner import TripPlanner
from evplanner.services.station_details import StationDetailsCache
from evplanner.utils.cards import format_duration, station_card_html, stop_card_html

logging.basicConfig(level=Config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

st.set_page_config(
    page_title="EV Route Planner",
    page_icon="",
    layout="wide",
    initial_sidebar_state="expanded"
)


def inject_stop_css():
    """Inject CSS used by the charging stop cards."""
    st.markdown(
        """
        <style>
        .card { background: #ffffff; border-radius: 12px; box-shadow: 0 1px 3px rgba(0,0,0,0.08), 0 1px 2px rgba(0,0,0,0.06); padding: 16px; margin-bottom: 12px; }
        .card-title { font-weight: 700; font-size: 18px; color: #111827; }
        .title-blue { color: #2563EB; }
        .title-green { color: #16A34A; }
        .pill { background: #EEF2FF; color: #4338CA; font-weight: 600; font-size: 12px; padding: 4px 10px; border-radius: 9999px; margin-right: 4px; }
        .pill-green { background: #DCFCE7; color: #166534; }
        .meta { color:#6B7280; font-size: 14px; margin-top: 6px; }
        .warn { color:#D97706; font-size: 14px; margin-top: 6px; }
        </style>
        """,
        unsafe_allow_html=True
    )


@st.cache_resource
def get_details_cache() -> StationDetailsCache:
    # One cache per server process so station details stay stable across reruns
    return StationDetailsCache()


@st.cache_resource
def get_trip_planner(api_key: str) -> TripPlanner:
    return TripPlanner(api_key, details_cache=get_details_cache())


def resolve_api_key():
    managed_api_key = None
    try:
        managed_api_key = st.secrets.get("GOOGLE_MAPS_API_KEY")  # type: ignore[attr-defined]
    except Exception:
        managed_api_key = None
    if not managed_api_key:
        managed_api_key = os.getenv("GOOGLE_MAPS_API_KEY")

    if managed_api_key:
        return managed_api_key.strip()

    st.markdown("**Google Maps API Configuration**")
    api_key = st.text_input(
        "Google Maps API Key",
        type="password",
        help="Enter your Google Maps API key for directions and charging station search"
    )
    api_key = api_key.strip() if api_key else api_key
    if not api_key:
        st.warning(" Google Maps API key is required for route planning")
    return api_key


def render_plan(plan: PlanResult):
    col1, col2, col3 = st.columns(3)
    col1.metric("Total Distance", f"{plan.total_distance_km} km")
    col2.metric("Estimated Time", format_duration(plan.total_time_minutes))
    col3.metric("Charging Stops", len(plan.stops))

    if not plan.stops:
        st.success("No charging stops needed for this trip.")
        return

    rows = []
    for i, stop in enumerate(plan.stops, start=1):
        rows.append({
            "Stop": i,
            "Direction": "Outward" if stop.direction == "outward" else "Return",
            "Distance (km)": stop.distance_km,
            "Needed at (km)": stop.original_distance_km,
            "Charge to (kWh)": stop.charge_amount_kwh,
            "Charging time": format_duration(stop.duration_minutes),
            "Station": stop.station.name if stop.station else "No station found",
        })
    st.dataframe(pd.DataFrame(rows), hide_index=True, width="stretch")

    for direction, title, css in (("outward", "Outward Journey", "title-blue"), ("return", "Return Journey", "title-green")):
        stops = [s for s in plan.stops if s.direction == direction]
        if not stops:
            continue
        st.markdown(f'<div class="card-title {css}">{title}</div>', unsafe_allow_html=True)
        for stop in stops:
            details = plan.station_details.get(stop.station.place_id or "") if stop.station else None
            st.markdown(stop_card_html(stop, details), unsafe_allow_html=True)


def main():
    st.title("EV Route Planner")
    inject_stop_css()

    with st.sidebar:
        mode = st.radio("Mode", ("Route Planner", "Find Chargers"), index=0)
        st.divider()
        api_key = resolve_api_key()

    if not api_key:
        st.stop()

    try:
        planner = get_trip_planner(api_key)
    except (ValueError, ImportError) as e:
        st.error(f" {e}")
        return

    if mode == "Route Planner":
        vehicles = list_vehicles()
        vehicle_name = st.selectbox("Select Your EV", vehicles, index=vehicles.index(DEFAULT_VEHICLE))
        profile = get_vehicle_profile(vehicle_name)
        st.caption(
            f"Battery {profile.battery_capacity_kwh} kWh · Range {profile.rated_range_km:.0f} km · "
            f"Charging up to {profile.charge_rate_kw:.0f} kW"
        )
        current_charge = st.slider("Current Charge (%)", min_value=0, max_value=100, value=80)
        source = st.text_input("Source", placeholder="Enter source location")
        destination = st.text_input("Destination", placeholder="Enter destination location")
        is_round_trip = st.checkbox("Round trip")

        if st.button(" Plan Route"):
            request = TripRequest(
                source=source,
                destination=destination,
                vehicle_name=vehicle_name,
                current_charge_percent=current_charge,
                is_round_trip=is_round_trip,
            )
            with st.spinner(" Planning charging stops..."):
                plan = planner.plan_trip(request)
            if not plan.is_valid:
                for error in plan.errors:
                    st.error(error)
            else:
                render_plan(plan)
    else:
        location = st.text_input("Location", placeholder="Enter a location to search for chargers")
        if location:
            with st.spinner(" Searching for charging stations..."):
                try:
                    stations = planner.find_chargers_near(location)
                except ValueError as e:
                    st.error(f" {e}")
                    return
            st.header("Nearby Charging Stations")
            if not stations:
                st.info("No charging stations found near this location.")
            for station in stations:
                details = get_details_cache().peek(station.place_id) if station.place_id else None
                st.markdown(station_card_html(station, details), unsafe_allow_html=True)


if __name__ == "__main__":
    main()
