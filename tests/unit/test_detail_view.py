"""Unit tests for the case detail view state."""
from unittest.mock import Mock

import pytest
import requests

from cases.domain.model import CaseRecord
from dashboard.detail import CaseDetailView
from tests.examples.case_loader import case_examples


@pytest.fixture
def case():
    return CaseRecord.from_dict(case_examples.load_sample_case())


def emails(view):
    return [contact.email for _, contact in view.visible_contacts()]


class TestSorting:
    def test_default_sort_is_firma_ascending_case_insensitive(self, case):
        view = CaseDetailView(case)

        firms = [contact.firma for _, contact in view.visible_contacts()]
        assert firms == ["alpha Solutions GmbH", "Beta Consulting", "Zeta Systems AG"]

    def test_email_ascending_then_descending(self, case):
        view = CaseDetailView(case)

        view.handle_sort("email")
        ascending = emails(view)
        view.handle_sort("email")
        descending = emails(view)

        assert ascending == ["Careers@beta.example", "hr@alpha.example", "jobs@zeta.example"]
        assert descending == list(reversed(ascending))
        assert view.sort_direction == "desc"

    def test_new_field_starts_ascending(self, case):
        view = CaseDetailView(case, sort_field="email", sort_direction="desc")

        view.handle_sort("plz")

        assert (view.sort_field, view.sort_direction) == ("plz", "asc")
        assert view.sort_indicator("plz") == "↑"
        assert view.sort_indicator("email") == ""

    def test_umlauts_sort_with_their_base_letter(self):
        case = CaseRecord.from_dict(case_examples.create_case_with_id(1, contacts=[
            {"firma": "Zeta AG", "email": "z@zeta.example", "plz": "8000"},
            {"firma": "Äpfel GmbH", "email": "info@aepfel.example", "plz": "8001"},
            {"firma": "Birne AG", "email": "b@birne.example", "plz": "8002"},
            {"firma": "österreich Handel", "email": "o@handel.example", "plz": "8003"},
        ]))
        view = CaseDetailView(case)

        firms = [contact.firma for _, contact in view.visible_contacts()]
        assert firms == ["Äpfel GmbH", "Birne AG", "österreich Handel", "Zeta AG"]

        view.handle_sort("firma")
        firms = [contact.firma for _, contact in view.visible_contacts()]
        assert firms == ["Zeta AG", "österreich Handel", "Birne AG", "Äpfel GmbH"]

    def test_unknown_sort_field_rejected(self, case):
        with pytest.raises(ValueError):
            CaseDetailView(case).handle_sort("phone")

    def test_invalid_initial_state_falls_back_to_defaults(self, case):
        view = CaseDetailView(case, sort_field="phone", sort_direction="up")

        assert (view.sort_field, view.sort_direction) == ("firma", "asc")


class TestFiltering:
    @pytest.mark.parametrize("query,expected", [
        ("BETA", ["Careers@beta.example"]),
        ("800", ["Careers@beta.example", "jobs@zeta.example"]),
        ("example", ["Careers@beta.example", "hr@alpha.example", "jobs@zeta.example"]),
        ("missing", []),
    ])
    def test_contact_search(self, case, query, expected):
        view = CaseDetailView(case, contact_search=query, sort_field="email")

        assert emails(view) == expected

    @pytest.mark.parametrize("sort_field", ["firma", "email", "plz"])
    @pytest.mark.parametrize("sort_direction", ["asc", "desc"])
    def test_filter_and_sort_commute(self, case, sort_field, sort_direction):
        query = "80"
        view = CaseDetailView(case, contact_search=query, sort_field=sort_field, sort_direction=sort_direction)

        sorted_view = CaseDetailView(case, sort_field=sort_field, sort_direction=sort_direction)
        sort_then_filter = [
            (i, c) for i, c in sorted_view.visible_contacts()
            if query in c.firma.lower() or query in c.email.lower() or query in c.plz
        ]

        assert view.visible_contacts() == sort_then_filter


class TestSelection:
    def test_toggle_contact(self, case):
        view = CaseDetailView(case)

        view.toggle_contact(1)
        view.toggle_contact(2)
        view.toggle_contact(1)

        assert view.selected == {2}

    def test_selection_survives_resorting(self, case):
        view = CaseDetailView(case, selected=[0])

        view.handle_sort("email")
        view.handle_sort("email")

        selected = [c.firma for i, c in view.visible_contacts() if i in view.selected]
        assert selected == ["Zeta Systems AG"]

    def test_query_params_round_trip(self, case):
        view = CaseDetailView(case, contact_search="beta", selected=[2, 0])

        assert view.query_params() == {"sort": "firma", "dir": "asc", "search": "beta", "selected": "0,2"}
        assert view.sort_params("firma")["dir"] == "desc"
        assert view.toggle_params(0)["selected"] == "2"
        # link helpers leave the view itself untouched
        assert view.sort_direction == "asc"
        assert view.selected == {0, 2}


class TestConfirm:
    def test_posts_case_id_to_confirm_url(self, case):
        case.confirm_url = "https://external/confirm/1"
        session = Mock()

        assert CaseDetailView(case, session=session).confirm() is True
        session.post.assert_called_once_with("https://external/confirm/1", json={"caseId": 1})

    def test_missing_url_is_noop_with_warning(self, case, caplog):
        session = Mock()

        assert CaseDetailView(case, session=session).confirm() is False
        session.post.assert_not_called()
        assert "No confirm_url set on case 1" in caplog.text

    def test_request_failure_is_logged_not_raised(self, case):
        case.confirm_url = "https://external/confirm/1"
        session = Mock()
        session.post.side_effect = requests.ConnectionError("unreachable")

        assert CaseDetailView(case, session=session).confirm() is False
