"""Single-page HTML view: filter buttons, Leaflet map, share form, latest stories."""
import html
import json
import urllib.parse
from typing import Optional, Sequence

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import HTMLResponse

from datespots.api.state import VisitorSession, get_session, set_session_cookie
from datespots.config import (
    ALL_RATINGS,
    ALL_TYPES,
    DATE_TYPES,
    NOTICE_FAILED,
    RATING_OPTIONS,
    SESSION_COOKIE,
)
from datespots.core.filters import list_view
from datespots.core.map_view import build_map_view, rating_stars
from datespots.models.form import Filters
from datespots.models.story import DateStory

router = APIRouter()


def _json_for_script(data) -> str:
    """JSON safe to drop inside a <script> element."""
    return json.dumps(data, ensure_ascii=False).replace("</", "<\\/")


def _stars_html(rating) -> str:
    return "".join(
        f'<span class="star{" filled" if filled else ""}">&#9733;</span>'
        for filled in rating_stars(rating)
    )


def _filter_url(filters: Filters, *, selected_type: Optional[str] = None, selected_rating: Optional[str] = None) -> str:
    params = {
        "type": selected_type if selected_type is not None else filters.selected_type,
        "rating": selected_rating if selected_rating is not None else filters.selected_rating,
    }
    return "/?" + urllib.parse.urlencode(params)


def _type_buttons(filters: Filters) -> str:
    out = []
    for t in (ALL_TYPES, *DATE_TYPES):
        active = " active" if t == filters.selected_type else ""
        href = html.escape(_filter_url(filters, selected_type=t))
        out.append(f'<a class="type-button{active}" href="{href}">{html.escape(t)}</a>')
    return "\n".join(out)


def _rating_links(filters: Filters) -> str:
    out = []
    for r in (ALL_RATINGS, *RATING_OPTIONS):
        active = " active" if r == filters.selected_rating else ""
        label = r if r == ALL_RATINGS else "&#9733;" * int(r)
        href = html.escape(_filter_url(filters, selected_rating=r))
        out.append(f'<a class="rating-link{active}" href="{href}">{label}</a>')
    return "\n".join(out)


def _story_cards(stories: Sequence[DateStory]) -> str:
    if not stories:
        return '<p class="empty">No date stories yet.</p>'
    cards = []
    for s in stories:
        cards.append(
            '<div class="card">'
            f"<h3>{html.escape(s.location)}</h3>"
            f'<div class="stars">{_stars_html(s.rating)}</div>'
            f"<p>{html.escape(s.story)}</p>"
            f'<span class="badge">{html.escape(s.type_of_date)}</span>'
            "</div>"
        )
    return "\n".join(cards)


def _type_options() -> str:
    return "\n".join(f'<option value="{html.escape(t)}"></option>' for t in DATE_TYPES)


def render_page(session: VisitorSession) -> str:
    """Page for one visitor. The share form always starts empty and closed."""
    filters = session.get_filters()
    visible = session.get_visible()
    view = build_map_view(visible)
    messages = {"failed": NOTICE_FAILED}
    overlay = view["overlay"]
    overlay_color, overlay_opacity = overlay["color"], overlay["opacity"]

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>Dates of Bangalore</title>
<link rel="stylesheet" href="https://unpkg.com/leaflet@1.9.4/dist/leaflet.css">
<script src="https://unpkg.com/leaflet@1.9.4/dist/leaflet.js"></script>
<style>
  body {{ background: #111827; color: #fff; font-family: sans-serif; text-align: center; margin: 0; padding: 2rem; }}
  h1 {{ font-size: 1.9rem; }}
  .type-buttons {{ display: flex; flex-wrap: wrap; justify-content: center; gap: 2rem; margin-bottom: 1rem; }}
  .type-button {{ width: 350px; padding: 30px; border-radius: 8px; background: #f472b6; color: #fff; text-decoration: none; }}
  .type-button.active {{ background: #db2777; }}
  .ratings {{ margin-bottom: 2rem; }}
  .rating-link {{ color: #fbcfe8; margin: 0 .5rem; text-decoration: none; }}
  .rating-link.active {{ color: #facc15; font-weight: bold; }}
  .map-wrap {{ position: relative; width: 100%; height: 500px; border-radius: 8px; overflow: hidden; }}
  #map {{ width: 100%; height: 100%; }}
  .map-overlay {{ position: absolute; inset: 0; background: {overlay_color}; opacity: {overlay_opacity}; z-index: 999; pointer-events: none; }}
  .leaflet-marker-icon.custom-icon {{ filter: drop-shadow(0 0 3px rgba(0,0,0,0.2)); }}
  .star {{ color: #d1d5db; }}
  .star.filled {{ color: #facc15; }}
  .share {{ margin-top: 2rem; background: #ec4899; color: #fff; border: 0; padding: .6rem 1.2rem; border-radius: 6px; cursor: pointer; }}
  .modal {{ position: fixed; inset: 0; background: rgba(0,0,0,.6); display: flex; align-items: center; justify-content: center; z-index: 2000; }}
  .modal.hidden {{ display: none; }}
  .modal form {{ background: #1f2937; padding: 1.5rem; border-radius: 8px; width: min(600px, 90vw); display: grid; gap: .8rem; text-align: left; }}
  .modal input, .modal textarea {{ padding: .5rem; border-radius: 4px; border: 1px solid #9ca3af; }}
  .cards {{ max-width: 56rem; margin: 2rem auto; display: grid; gap: 1rem; text-align: left; }}
  .card {{ background: #1f2937; padding: 1rem; border-radius: 6px; }}
  .badge {{ display: inline-block; margin-top: .5rem; background: #db2777; padding: .2rem .5rem; border-radius: 4px; font-size: .85rem; }}
</style>
</head>
<body>
<h1>&#9829; Dates of Bangalore &#9829;</h1>

<div class="type-buttons">
{_type_buttons(filters)}
</div>
<div class="ratings">
{_rating_links(filters)}
</div>

<div class="map-wrap">
  <div id="map"></div>
  <div class="map-overlay"></div>
</div>

<button class="share" id="open-form" type="button">Share your date</button>

<div class="modal hidden" id="form-modal">
  <form id="story-form">
    <h2>Share your date story</h2>
    <input type="number" name="rating" min="1" max="5" placeholder="Rating (1-5)">
    <input type="text" name="type_of_date" list="date-types" placeholder="Type of date">
    <datalist id="date-types">
{_type_options()}
    </datalist>
    <input type="text" name="location" placeholder="Location">
    <textarea name="story" placeholder="Your story..."></textarea>
    <div>
      <button class="share" type="submit">Share Date</button>
      <button type="button" id="close-form">Cancel</button>
    </div>
  </form>
</div>

<div class="cards">
{_story_cards(list_view(visible))}
</div>

<script>
const VIEW = {_json_for_script(view)};
const MESSAGES = {_json_for_script(messages)};

const map = L.map('map', {{ scrollWheelZoom: VIEW.scroll_wheel_zoom }});
map.fitBounds(VIEW.bounds);
L.tileLayer(VIEW.tile_layer.url, {{ attribution: VIEW.tile_layer.attribution }}).addTo(map);

VIEW.markers.forEach(m => {{
  const icon = L.icon({{
    iconUrl: m.icon_url,
    iconSize: VIEW.icon.size,
    iconAnchor: VIEW.icon.anchor,
    popupAnchor: VIEW.icon.popup_anchor,
    className: 'custom-icon',
  }});
  const popup = document.createElement('div');
  const title = document.createElement('strong');
  title.textContent = m.location;
  const text = document.createElement('p');
  text.textContent = m.story;
  const stars = document.createElement('div');
  m.stars.forEach(filled => {{
    const s = document.createElement('span');
    s.className = filled ? 'star filled' : 'star';
    s.innerHTML = '&#9733;';
    stars.appendChild(s);
  }});
  popup.append(title, text, stars);
  L.marker([m.lat, m.lng], {{ icon }}).bindPopup(popup).addTo(map);
}});

const modal = document.getElementById('form-modal');
document.getElementById('open-form').addEventListener('click', () => {{
  modal.classList.remove('hidden');
  fetch('/api/form/open', {{ method: 'POST' }});
}});
document.getElementById('close-form').addEventListener('click', () => {{
  modal.classList.add('hidden');
  fetch('/api/form/close', {{ method: 'POST' }});
}});

const form = document.getElementById('story-form');
const submitButton = form.querySelector('button[type=submit]');
form.addEventListener('submit', async (e) => {{
  e.preventDefault();
  const body = Object.fromEntries(new FormData(form).entries());
  submitButton.disabled = true;
  try {{
    const res = await fetch('/api/stories/', {{
      method: 'POST',
      headers: {{ 'Content-Type': 'application/json' }},
      body: JSON.stringify(body),
    }});
    const data = await res.json();
    if (res.ok) {{
      alert(data.notice);
      window.location.reload();
      return;
    }}
    alert((data.detail && data.detail.notice) || MESSAGES.failed);
  }} catch (err) {{
    console.error('Error submitting story:', err);
    alert(MESSAGES.failed);
  }} finally {{
    submitButton.disabled = false;
  }}
}});
</script>
</body>
</html>
"""


@router.get("/", response_class=HTMLResponse)
def index(
    request: Request,
    selected_type: Optional[str] = Query(None, alias="type"),
    selected_rating: Optional[str] = Query(None, alias="rating"),
    session: VisitorSession = Depends(get_session),
):
    """Render the map page; ?type= and ?rating= select the filters (default: all)."""
    try:
        session.start_page(selected_type, selected_rating)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    response = HTMLResponse(render_page(session))
    if request.cookies.get(SESSION_COOKIE) != session.id:
        set_session_cookie(response, session)
    return response
