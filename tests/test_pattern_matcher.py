"""
Test Suite for PatternMatcher Service
Tests every catalog pattern, severity metadata and text concatenation rules.
"""
import os
import sys

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.models import IssueRecord, SEVERITY_LEVELS
from app.services.pattern_matcher import PatternMatcher


def make_record(title='', messages='', tags=''):
    return IssueRecord(platform='ios', version='1.0', created_date='2024-01-01',
                       title=title, messages=messages, tags=tags, os_version='17', country='US')


class TestCatalog:
    """Test the static catalog table"""

    @pytest.fixture
    def matcher(self):
        return PatternMatcher()

    def test_catalog_keys_and_severities(self, matcher):
        severities = {d.key: d.severity for d in matcher.definitions}
        assert severities == {
            'hardCrash': 'critical',
            'suddenExit': 'critical',
            'freeze': 'high',
            'rewardStuck': 'high',
            'loadingStuck': 'medium',
            'progressLost': 'high',
            'uiStuck': 'medium',
            'performanceLag': 'low',
            'blackScreen': 'medium',
        }

    def test_severities_drawn_from_known_levels(self, matcher):
        assert all(d.severity in SEVERITY_LEVELS for d in matcher.definitions)

    def test_keys_unique(self, matcher):
        keys = [d.key for d in matcher.definitions]
        assert len(keys) == len(set(keys))

    def test_format_pattern_name(self, matcher):
        assert matcher.format_pattern_name('hardCrash') == 'Hard Crashes'
        assert matcher.format_pattern_name('blackScreen') == 'Black Screen'
        assert matcher.format_pattern_name('somethingNew') == 'SomethingNew'

    def test_catalog_as_dicts(self, matcher):
        catalog = matcher.catalog_as_dicts()
        assert len(catalog) == 9
        assert catalog[0]['key'] == 'hardCrash'
        assert 'crash' in catalog[0]['pattern']


class TestMatch:
    """Test per-record classification"""

    @pytest.fixture
    def matcher(self):
        return PatternMatcher()

    def matched(self, matcher, **fields):
        return set(matcher.matched_keys(matcher.match(make_record(**fields))))

    def test_match_set_has_entry_for_every_pattern(self, matcher):
        match_set = matcher.match(make_record(title='all good'))
        assert list(match_set) == [d.key for d in matcher.definitions]
        assert not any(m.matched for m in match_set.values())

    def test_match_carries_severity_and_description(self, matcher):
        result = matcher.match(make_record(title='app crashes on launch'))['hardCrash']
        assert result.matched is True
        assert result.severity == 'critical'
        assert result.description == 'App completely crashes or force closes'

    @pytest.mark.parametrize('title', [
        'App crashes on launch',
        'it crashed twice',
        'keeps crashing',
        'the app closes by itself',
        'app shuts down randomly',
    ])
    def test_hard_crash(self, matcher, title):
        assert 'hardCrash' in self.matched(matcher, title=title)

    def test_hard_crash_needs_word_boundary(self, matcher):
        assert 'hardCrash' not in self.matched(matcher, title='crashpad uploaded')

    @pytest.mark.parametrize('title', [
        'game suddenly stops',
        'app disappears from screen',
        'unexpectedly close after ad',
        'unexpected exit',
    ])
    def test_sudden_exit(self, matcher, title):
        assert 'suddenExit' in self.matched(matcher, title=title)

    @pytest.mark.parametrize('title', ['UI is frozen', 'screen freezes', 'not responding', 'totally unresponsive'])
    def test_freeze(self, matcher, title):
        assert 'freeze' in self.matched(matcher, title=title)

    @pytest.mark.parametrize('title', ['daily reward is stuck', "I can't claim my prize", 'reward button not working'])
    def test_reward_stuck(self, matcher, title):
        assert 'rewardStuck' in self.matched(matcher, title=title)

    @pytest.mark.parametrize('title', ['loading forever', "level won't load", 'stuck on loading'])
    def test_loading_stuck(self, matcher, title):
        assert 'loadingStuck' in self.matched(matcher, title=title)

    @pytest.mark.parametrize('title', ['all my progress was lost', 'coins back to zero', 'lost all items', 'bag shows zero'])
    def test_progress_lost(self, matcher, title):
        assert 'progressLost' in self.matched(matcher, title=title)

    @pytest.mark.parametrize('title', ['stuck on map', 'app hangs', 'tap does not work', 'button does not work'])
    def test_ui_stuck(self, matcher, title):
        assert 'uiStuck' in self.matched(matcher, title=title)

    @pytest.mark.parametrize('title', ['so much lag', 'very slow', 'choppy animations', 'low fps'])
    def test_performance_lag(self, matcher, title):
        assert 'performanceLag' in self.matched(matcher, title=title)

    @pytest.mark.parametrize('title', ['black screen after splash', 'white screen', 'screen goes blank'])
    def test_black_screen(self, matcher, title):
        assert 'blackScreen' in self.matched(matcher, title=title)

    def test_one_record_can_match_several_patterns(self, matcher):
        keys = self.matched(matcher, title='Frozen then crashed', messages='very slow before that')
        assert {'freeze', 'hardCrash', 'performanceLag'} <= keys

    def test_matching_is_case_insensitive(self, matcher):
        assert 'hardCrash' in self.matched(matcher, title='APP CRASHES')

    def test_non_ascii_neighbour_is_a_word_boundary(self, matcher):
        assert 'hardCrash' in self.matched(matcher, title='crash\u00e9 au lancement')
        assert 'freeze' in self.matched(matcher, title='\u00e9cran frozen\u00e9')

    def test_tags_and_messages_are_searched(self, matcher):
        assert 'freeze' in self.matched(matcher, tags='["freeze"]')
        assert 'blackScreen' in self.matched(matcher, messages='Black screen on start')


class TestBuildText:
    """Test text concatenation order"""

    def test_order_is_title_tags_messages(self):
        record = make_record(title='Title', tags='["Tag"]', messages='Body')
        assert PatternMatcher.build_text(record) == 'title ["tag"] body'

    def test_missing_fields_are_empty(self):
        record = make_record(title='Only title')
        assert PatternMatcher.build_text(record) == 'only title  '

    def test_match_is_deterministic(self):
        matcher = PatternMatcher()
        record = make_record(title='stuck and slow')
        assert matcher.match(record) == matcher.match(record)
