from conftest import customer_record, segment_record
from xeno_crm import data_access
from xeno_crm.models import CampaignDraft, Segment, Session

SESSION = Session(customer_id=7, name="Asha", email="asha@example.com")


def _named_draft(name="Regulars"):
    seg = Segment.draft()
    seg.name = name
    return seg


def test_load_segments_ok(http, client):
    http.reply("GET", "/audience/all", {"segments": [segment_record()]})
    res = data_access.load_segments(client)
    assert res.ok
    assert [s.name for s in res.data] == ["Big spenders"]


def test_load_segments_malformed_conditions_is_an_error_not_a_partial_list(http, client):
    http.reply("GET", "/audience/all", {
        "segments": [segment_record(), segment_record(id=2, conditions="{not json")],
    })
    res = data_access.load_segments(client)
    assert res.data is None
    assert res.error == "Failed to fetch existing segments. Please try again."


def test_load_segments_network_failure(http, client):
    http.fail("GET", "/audience/all")
    res = data_access.load_segments(client)
    assert res.error == "Failed to fetch existing segments. Please try again."


def test_create_segment_requires_name(http, client):
    res = data_access.create_segment(client, _named_draft("  "))
    assert res.error == "Segment name is required."
    assert http.calls == []


def test_create_segment_failure(http, client):
    http.reply("POST", "/audience", {}, status=500)
    res = data_access.create_segment(client, _named_draft())
    assert res.error == "Failed to create segment. Please try again."


def test_estimate_audience_size(http, client):
    http.reply("POST", "/audience/size", {"size": {"audienceSize": 88}})
    assert data_access.estimate_audience_size(client, _named_draft()).data == 88

    http.fail("POST", "/audience/size")
    res = data_access.estimate_audience_size(client, _named_draft())
    assert res.error == "Failed to calculate audience size. Please try again."


def test_load_campaign_segments_leaves_conditions_unparsed(http, client):
    http.reply("GET", "/audience/all", {"segments": [segment_record(conditions="{not json")]})
    res = data_access.load_campaign_segments(client)
    assert res.ok
    assert res.data[0].name == "Big spenders"


def test_campaign_without_placeholder_is_rejected_before_any_request(http, client):
    res = data_access.create_campaign(client, CampaignDraft(4, "Hello there", "2024-12-24T09:00"))
    assert res.error == 'The message must include the placeholder "[Name]" for personalization.'
    assert http.calls == []


def test_campaign_without_segment_is_rejected(http, client):
    res = data_access.create_campaign(client, CampaignDraft(0, "Hi [Name]", ""))
    assert not res.ok
    assert http.calls == []


def test_create_campaign(http, client):
    http.reply("POST", "/campaign", {"id": 5})
    res = data_access.create_campaign(client, CampaignDraft(4, "Hi [Name]!", "2024-12-24T09:00"))
    assert res.ok

    http.reply("POST", "/campaign", {}, status=400)
    res = data_access.create_campaign(client, CampaignDraft(4, "Hi [Name]!", "2024-12-24T09:00"))
    assert res.error == "Failed to create campaign. Please try again."


def test_load_orders_requires_session(http, client):
    res = data_access.load_orders(client, None)
    assert res.error == "User not authenticated or customer ID not found."
    assert http.calls == []


def test_load_orders_reported_error_message_is_shown(http, client):
    http.reply("GET", "/orders/customer/7", {"error": "NotFound", "message": "No such customer"})
    res = data_access.load_orders(client, SESSION)
    assert res.error == "No such customer"
    assert res.data == []


def test_load_orders_transport_failure(http, client):
    http.fail("GET", "/orders/customer/7")
    res = data_access.load_orders(client, SESSION)
    assert res.error == "An error occurred while fetching orders. Please try again later."


def test_load_orders_ok(http, client):
    http.reply("GET", "/orders/customer/7", [{
        "id": 1,
        "customerId": 7,
        "orderDate": "2024-12-01",
        "revenue": "10",
        "cost": "4",
        "customer": customer_record(),
    }])
    res = data_access.load_orders(client, SESSION)
    assert res.ok and len(res.data) == 1


def test_create_order_uses_session_customer(http, client):
    http.reply("POST", "/orders", {"id": 1})
    res = data_access.create_order(client, SESSION, order_date="2024-12-01", revenue=10.0, cost=4.0)
    assert res.ok
    assert http.calls[-1]["json"]["customerId"] == 7


def test_create_order_errors(http, client):
    assert data_access.create_order(client, None, "2024-12-01", 1.0, 1.0).error == (
        "You need to be logged in to create an order."
    )
    assert data_access.create_order(client, SESSION, "", 1.0, 1.0).error == "Order date is required."
    assert http.calls == []

    http.reply("POST", "/orders", {}, status=500)
    res = data_access.create_order(client, SESSION, "2024-12-01", 1.0, 1.0)
    assert res.error == "An error occurred while creating the order. Please try again."


def test_load_messages(http, client):
    assert data_access.load_messages(client, None).error == "User not authenticated or customer ID not found."

    http.reply("GET", "/customers/messages/7", {"data": None, "error": True, "message": "Unknown customer"})
    assert data_access.load_messages(client, SESSION).error == "Unknown customer"

    http.fail("GET", "/customers/messages/7")
    assert data_access.load_messages(client, SESSION).error == "Failed to fetch messages. Please try again later."

    http.reply("GET", "/customers/messages/7", {"data": []})
    res = data_access.load_messages(client, SESSION)
    assert res.ok and res.data == []


def test_load_orders_non_numeric_amount_is_reported_in_error_slot(http, client):
    http.reply("GET", "/orders/customer/7", [{
        "id": 1,
        "customerId": 7,
        "orderDate": "2024-12-01",
        "revenue": "10",
        "cost": "n/a",
        "customer": customer_record(),
    }])
    res = data_access.load_orders(client, SESSION)
    assert res.error == "An error occurred while fetching orders. Please try again later."


def test_campaign_without_schedule_is_rejected(http, client):
    res = data_access.create_campaign(client, CampaignDraft(4, "Hi [Name]", ""))
    assert res.error == "Please choose when to send the campaign."
    assert http.calls == []
