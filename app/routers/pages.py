from fastapi import APIRouter
from fastapi.responses import HTMLResponse

router = APIRouter(tags=["pages"])

# Portal cards shown on the landing page: (title, description, href)
PORTALS = [
    ("Admin Portal", "Manage customers, events, and view analytics.", "/docs#/admin-auth"),
    ("Customer Portal", "Register for events and manage your profile.", "/docs"),
    ("QR Check-in", "Quick and easy event check-in using QR codes.", "/docs"),
    ("Analytics", "View attendance reports and customer insights.", "/docs"),
]

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>Ticket Management System</title>
</head>
<body>
  <main>
    <h1>Ticket Management System</h1>
    <section>
      <h2>Customer Information Management + QR Code Check-in Demo</h2>
      <p>
        Welcome to the Ticket Management System. This is a demo application
        for customer information management and QR code check-in functionality.
      </p>
    </section>
    <nav>
{cards}
    </nav>
  </main>
</body>
</html>
"""

CARD_TEMPLATE = """      <a href="{href}">
        <h3>{title}</h3>
        <p>{description}</p>
      </a>"""


def render_landing_page() -> str:
    cards = "\n".join(
        CARD_TEMPLATE.format(title=title, description=description, href=href)
        for title, description, href in PORTALS
    )
    return PAGE_TEMPLATE.format(cards=cards)


LANDING_PAGE = render_landing_page()


@router.get("/", response_class=HTMLResponse)
def landing_page():
    return HTMLResponse(content=LANDING_PAGE)
