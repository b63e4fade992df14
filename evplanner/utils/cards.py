"""
HTML fragments for the station and charging stop cards shown by the Streamlit page
"""

import html
from typing import Optional

from evplanner.models.planner_models import ChargingStop, StationCandidate, StationDetails


def format_duration(minutes):
    """Format duration in minutes to human readable format"""
    minutes = int(minutes)
    if minutes >= 60:
        hours = minutes // 60
        remaining_minutes = minutes % 60
        return f"{hours}h {remaining_minutes}m"
    else:
        return f"{minutes}m"


def station_details_html(details: StationDetails) -> str:
    types_html = "".join(f'<span class="pill pill-green">{html.escape(t)}</span>' for t in details.charger_types)
    connectors_html = "".join(f'<span class="pill">{html.escape(c)}</span>' for c in details.connectors)
    return (
        f'<div class="meta">Power Output: {html.escape(details.power)}</div>'
        f'<div class="meta">Available Connectors: {connectors_html}</div>'
        f'<div class="meta">Charger Types: {types_html}</div>'
    )


def station_card_html(station: StationCandidate, details: Optional[StationDetails] = None) -> str:
    """Card for a station found by the charger search; place names and addresses are escaped"""
    rating = f" · Rating: {station.rating} ⭐" if station.rating else ""
    open_now = " · Open Now" if station.open_now else ""
    markup = (
        '<div class="card">'
        f'<div class="card-title">{html.escape(station.name or "Charging station")}</div>'
        f'<div class="meta">{html.escape(station.address)}{rating}{open_now}</div>'
    )
    if details:
        markup += station_details_html(details)
    return markup + "</div>"


def stop_card_html(stop: ChargingStop, details: Optional[StationDetails] = None) -> str:
    """Card for one planned charging stop"""
    markup = (
        '<div class="card">'
        f'<div class="card-title">Charging stop at {stop.distance_km} km</div>'
        f'<div class="meta">Charge for {format_duration(stop.duration_minutes)} '
        f'to {stop.charge_amount_kwh} kWh</div>'
    )
    if stop.station is None:
        markup += (
            f'<div class="warn">No charging station found nearby. Suggested stop at '
            f'{stop.location.lat:.4f}, {stop.location.lng:.4f}</div>'
        )
    else:
        markup += f'<div class="meta">{html.escape(stop.station.name)} · {html.escape(stop.station.address)}</div>'
        if stop.distance_km != stop.original_distance_km:
            markup += f'<div class="meta">Charging was needed at {stop.original_distance_km} km</div>'
        if details:
            markup += station_details_html(details)
    return markup + "</div>"
