"""Unit tests for owner display-name resolution."""

from pipeline_board.models.deal import Deal, OwnerRef
from pipeline_board.owners import OWNER_FALLBACK, resolve_owner


class TestResolveOwner:
    """Tests for the ordered owner fallback chain."""

    def test_account_manager_wins(self) -> None:
        """A non-blank account manager is used first, trimmed."""
        deal = Deal(
            id="d",
            account_manager="  Ravi Kumar ",
            assigned_to=OwnerRef(first_name="Priya", last_name="Shah"),
        )
        assert resolve_owner(deal) == "Ravi Kumar"

    def test_blank_account_manager_skipped(self) -> None:
        """Whitespace-only manager names are treated as blank."""
        deal = Deal(id="d", account_manager="   ", assigned_to=OwnerRef(first_name="Priya", last_name="Shah"))
        assert resolve_owner(deal) == "Priya Shah"

    def test_assignee_first_name_only(self) -> None:
        """Either name part is enough."""
        deal = Deal(id="d", assigned_to=OwnerRef(first_name=" Priya "))
        assert resolve_owner(deal) == "Priya"

    def test_assignee_username(self) -> None:
        """Username is used when the assignee has no name."""
        deal = Deal(id="d", assigned_to=OwnerRef(first_name=" ", username="pshah"))
        assert resolve_owner(deal) == "pshah"

    def test_assignee_before_salesperson(self) -> None:
        """The assignee is tried before the salesperson."""
        deal = Deal(
            id="d",
            assigned_to=OwnerRef(username="pshah"),
            salesperson=OwnerRef(first_name="Karl", last_name="Doe"),
        )
        assert resolve_owner(deal) == "pshah"

    def test_salesperson_name(self) -> None:
        """Salesperson first+last name when the assignee yields nothing."""
        deal = Deal(id="d", assigned_to=OwnerRef(), salesperson=OwnerRef(first_name="Karl", last_name="Doe"))
        assert resolve_owner(deal) == "Karl Doe"

    def test_only_salesperson_username(self) -> None:
        """Only a secondary-reference username populated: that username is returned."""
        deal = Deal(id="d", salesperson=OwnerRef(username="kdoe"))
        assert resolve_owner(deal) == "kdoe"

    def test_fallback(self) -> None:
        """No source populated: fixed fallback."""
        assert resolve_owner(Deal(id="d")) == OWNER_FALLBACK == "Owner N/A"

    def test_bare_ids_do_not_count(self) -> None:
        """Unpopulated references (ids only) carry no display name."""
        deal = Deal.model_validate({"_id": "d", "assignedTo": "u-1", "salespersonId": "u-2"})
        assert resolve_owner(deal) == "Owner N/A"
