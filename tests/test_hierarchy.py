"""
Tests for hierarchy navigation: source/target resolution and breadcrumbs.
"""

from explorer.state.hierarchy import (
    get_breadcrumbs,
    resolve_source_target,
    update_source_target,
)
from explorer.state.models import Breadcrumb, QueryState


class TestResolveSourceTarget:
    """Source is the group, target the next dimension"""

    def test_top_of_hierarchy(self, package_model):
        """Test a top-level group targets the next level"""
        assert resolve_source_target(['region'], package_model) == ('region', 'country')

    def test_middle_of_hierarchy(self, package_model):
        """Test a middle group targets the next level"""
        assert resolve_source_target(['country'], package_model) == ('country', 'city')

    def test_bottom_of_hierarchy(self, package_model):
        """Test the pair collapses onto the last two levels at the bottom"""
        assert resolve_source_target(['city'], package_model) == ('country', 'city')

    def test_single_dimension_hierarchy(self, package_model):
        """Test source equals target in a one-level hierarchy"""
        assert resolve_source_target(['ministry'], package_model) == ('ministry', 'ministry')

    def test_unknown_or_empty_group(self, package_model):
        """Test groups outside any hierarchy clear the pair"""
        assert resolve_source_target(['unknown'], package_model) == (None, None)
        assert resolve_source_target([], package_model) == (None, None)

    def test_only_first_group_used(self, package_model):
        """Test only the first group key is considered"""
        assert resolve_source_target(['year', 'region'], package_model) == ('year', 'month')


class TestUpdateSourceTarget:
    """In-place update of a scratch state"""

    def test_updates_in_place(self, package_model):
        """Test the given state is updated and returned"""
        state = QueryState(groups=['country'])
        result = update_source_target(state, package_model)
        assert result is state
        assert (state.source, state.target) == ('country', 'city')

    def test_clears_stale_pair(self, package_model):
        """Test a stale pair is cleared when the group is unknown"""
        state = QueryState(groups=['unknown'], source='region', target='country')
        update_source_target(state, package_model)
        assert state.source is None
        assert state.target is None


class TestBreadcrumbs:
    """Drill-down trail derived from the current group"""

    def test_trail_after_drilling(self, package_model):
        """Test one breadcrumb per level down to the current group"""
        state = QueryState(
            groups=['city'],
            filters={'region': ['EU'], 'country': ['DE'], 'year': ['2020']},
        )
        breadcrumbs = get_breadcrumbs(state, package_model)

        assert breadcrumbs == [
            Breadcrumb(groups=['region'], filters={'year': ['2020']},
                       dimension='region', value=None),
            Breadcrumb(groups=['country'], filters={'region': ['EU'], 'year': ['2020']},
                       dimension='country', value='EU'),
            Breadcrumb(groups=['city'],
                       filters={'region': ['EU'], 'country': ['DE'], 'year': ['2020']},
                       dimension='city', value='DE'),
        ]

    def test_value_is_last_selected(self, package_model):
        """Test the most recent value of the coarser level labels the step"""
        state = QueryState(groups=['country'], filters={'region': ['EU', 'US']})
        breadcrumbs = get_breadcrumbs(state, package_model)
        assert breadcrumbs[-1].value == 'US'

    def test_no_trail_outside_hierarchy(self, package_model):
        """Test no breadcrumbs without a hierarchical group"""
        assert get_breadcrumbs(QueryState(groups=[]), package_model) == []
        assert get_breadcrumbs(QueryState(groups=['unknown']), package_model) == []

    def test_breadcrumb_filters_not_shared(self, package_model):
        """Test breadcrumbs do not alias the state's filter lists"""
        state = QueryState(groups=['country'], filters={'region': ['EU']})
        breadcrumbs = get_breadcrumbs(state, package_model)
        breadcrumbs[-1].filters['region'].append('US')
        assert state.filters == {'region': ['EU']}
