"""Unit tests for the Group aggregate."""

import pytest

from subsites.domain.aggregates import Group
from subsites.domain.value_objects import GroupId, parse_subsite_id


class TestGroupCreation:
    """Tests for Group.create."""

    def test_new_group_has_global_access_by_default(self):
        """Groups are global unless created restricted."""
        group = Group.create(title="Editors")

        assert group.access_all_subsites is True
        assert group.subsite_ids == set()
        assert group.is_persisted is False

    def test_title_is_trimmed(self):
        """Surrounding whitespace is removed from the title."""
        assert Group.create(title="  Editors ").title == "Editors"

    def test_blank_title_rejected(self):
        """A group needs a title."""
        with pytest.raises(ValueError):
            Group.create(title="   ")

    def test_created_with_links(self):
        """Initial subsite links are recorded."""
        group = Group.create(
            title="Editors", access_all_subsites=False, subsite_ids=[5, 7, 5]
        )

        assert group.subsite_ids == {5, 7}

    def test_main_site_cannot_be_linked(self):
        """Subsite 0 is the main site and never a link."""
        with pytest.raises(ValueError):
            Group.create(title="Editors", subsite_ids=[0])


class TestVisibility:
    """Tests for effective subsites and visibility."""

    def test_global_group_effective_set_is_every_subsite(self):
        """A global group applies to every subsite, linked or not."""
        group = Group(title="Everyone", access_all_subsites=True, subsite_ids={5})

        assert group.effective_subsite_ids([5, 7, 9]) == {5, 7, 9}

    def test_restricted_group_effective_set_is_links(self):
        """A restricted group applies to its links only."""
        group = Group(title="Shop", access_all_subsites=False, subsite_ids={5})

        assert group.effective_subsite_ids([5, 7, 9]) == {5}

    def test_restricted_group_without_links_is_visible_nowhere(self):
        """An empty restriction is valid and hides the group."""
        group = Group(title="Nowhere", access_all_subsites=False)

        assert group.effective_subsite_ids([5, 7]) == set()
        assert not group.is_visible_in(5)
        assert not group.is_visible_in(0, main_site_shows_all=False)

    @pytest.mark.parametrize(
        ("subsite_id", "expected"),
        [(None, True), (0, True), (5, True), (7, False)],
    )
    def test_restricted_group_visibility(self, subsite_id, expected):
        """Visibility follows the three subsite context states."""
        group = Group(title="Shop", access_all_subsites=False, subsite_ids={5})

        assert group.is_visible_in(subsite_id) is expected

    def test_main_site_sees_only_global_groups_when_configured(self):
        """With main_site_shows_all off, subsite 0 needs global access."""
        restricted = Group(title="Shop", access_all_subsites=False, subsite_ids={5})
        global_group = Group(title="Everyone")

        assert not restricted.is_visible_in(0, main_site_shows_all=False)
        assert global_group.is_visible_in(0, main_site_shows_all=False)


class TestAccessChanges:
    """Tests for changing a group's subsite access."""

    def test_restrict_to_replaces_links(self):
        """restrict_to turns global access off and sets the links."""
        group = Group(title="Editors", subsite_ids={5})

        group.restrict_to([7, 9])

        assert group.access_all_subsites is False
        assert group.subsite_ids == {7, 9}

    def test_restrict_to_rejects_main_site(self):
        """Links must be positive subsite IDs."""
        group = Group(title="Editors")

        with pytest.raises(ValueError):
            group.restrict_to([5, 0])
        assert group.access_all_subsites is True

    def test_allow_all_keeps_links(self):
        """Links survive switching global access on."""
        group = Group(title="Editors", access_all_subsites=False, subsite_ids={5})

        group.allow_all_subsites()

        assert group.access_all_subsites is True
        assert group.subsite_ids == {5}

    def test_join_subsite_reports_new_links(self):
        """Joining the same subsite twice adds one link."""
        group = Group(title="Editors")

        assert group.join_subsite(5) is True
        assert group.join_subsite(5) is False
        assert group.subsite_ids == {5}


class TestDescribeAccess:
    """Tests for the group tree label."""

    def test_global_group(self):
        """Global groups are labelled as such."""
        group = Group(title="Everyone", subsite_ids={5})

        assert group.describe_access({5: "Shop"}) == "Everyone (global group)"

    def test_restricted_group_lists_subsite_titles(self):
        """Linked subsites are listed by title in ID order."""
        group = Group(title="Editors", access_all_subsites=False, subsite_ids={7, 5})

        assert (
            group.describe_access({5: "Shop", 7: "Blog"}) == "Editors (Shop, Blog)"
        )

    def test_unknown_subsite_falls_back_to_id(self):
        """Subsites without a known title are shown by ID."""
        group = Group(title="Editors", access_all_subsites=False, subsite_ids={9})

        assert group.describe_access({}) == "Editors (#9)"


class TestValueObjects:
    """Tests for GroupId and subsite ID parsing."""

    def test_group_id_from_string(self):
        """Decimal strings become group IDs."""
        assert GroupId.from_string("42") == GroupId(value=42)

    @pytest.mark.parametrize("raw", ["abc", "0", "-3", ""])
    def test_group_id_rejects_invalid(self, raw):
        """Group IDs are positive integers."""
        with pytest.raises(ValueError):
            GroupId.from_string(raw)

    @pytest.mark.parametrize(("raw", "expected"), [("0", 0), (" 12 ", 12)])
    def test_parse_subsite_id(self, raw, expected):
        """Zero (the main site) and positive IDs are accepted."""
        assert parse_subsite_id(raw) == expected

    @pytest.mark.parametrize("raw", ["-1", "shop", "1.5"])
    def test_parse_subsite_id_rejects_invalid(self, raw):
        """Negative and non-integer IDs are rejected."""
        with pytest.raises(ValueError):
            parse_subsite_id(raw)
