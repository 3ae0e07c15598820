"""Tests for the jargon REST API handlers."""

import asyncio
import unittest

from fastapi import HTTPException

import server.app as api
from core.catalog import PatternCatalog
from core.errors import LoadFailure
from core.interfaces import WordSource
from core.patterns import PatternBrowser


WORDS = ["running", "jumping", "swimming", "walking",
         "prefix", "preview", "prepare", "action", "nation"]
VOCABULARY = {'ing': {'length': 3}, 'pre': {'length': 3}, 'tion': {'length': 4}}


class MockWordSource(WordSource):
    """Mock word source for testing."""

    def __init__(self, words=None, vocabulary=None, error: Exception = None):
        self.words = words if words is not None else list(WORDS)
        self.vocabulary = vocabulary if vocabulary is not None else dict(VOCABULARY)
        self.error = error

    def load_words(self) -> list[str]:
        if self.error:
            raise self.error
        return self.words

    def load_vocabulary(self) -> dict:
        return self.vocabulary


def run(coro):
    return asyncio.run(coro)


class APITestCase(unittest.TestCase):
    """Resets the module-level server state around each test."""

    def setUp(self):
        api.catalog = PatternCatalog()
        api.load_error = None
        api.storage = MockWordSource()
        api.user_sessions.clear()
        api.user_browsers.clear()
        api.load_catalog(api.storage)

    def tearDown(self):
        api.user_sessions.clear()
        api.user_browsers.clear()
        api.storage = None


class TestStatusEndpoints(APITestCase):

    def test_root(self):
        self.assertEqual(run(api.root()), {"service": "jargon", "loaded": True})

    def test_status(self):
        status = run(api.get_status())
        self.assertTrue(status.loaded)
        self.assertEqual(status.word_count, 9)
        self.assertEqual(status.record_count, 3)
        self.assertIsNone(status.error)

    def test_unloaded_service_reports_error(self):
        api.catalog = PatternCatalog()
        with self.assertRaises(LoadFailure):
            api.load_catalog(MockWordSource(error=OSError("missing words.json")))
        status = run(api.get_status())
        self.assertFalse(status.loaded)
        self.assertIn("missing words.json", status.error)

        with self.assertRaises(HTTPException) as ctx:
            run(api.get_patterns())
        self.assertEqual(ctx.exception.status_code, 503)
        with self.assertRaises(HTTPException):
            run(api.get_session_state())

    def test_reload_failure_keeps_previous_data(self):
        api.storage = MockWordSource(error=ValueError("bad json"))
        with self.assertRaises(HTTPException) as ctx:
            run(api.reload_data())
        self.assertEqual(ctx.exception.status_code, 503)
        self.assertTrue(run(api.get_status()).loaded)

    def test_reload_refreshes_sessions(self):
        run(api.toggle_selection(api.SelectRequest(key='ing_ends')))
        run(api.start_session(api.StartRequest(mode='find')))
        api.storage = MockWordSource(words=["prefix", "preview"], vocabulary={'pre': {'length': 3}})
        status = run(api.reload_data())
        self.assertEqual(status.record_count, 1)
        session = run(api.get_session_state())
        self.assertEqual(session.state, 'active')
        self.assertIsNone(session.challenge)

    def test_rarities(self):
        tiers = run(api.get_rarities())['tiers']
        self.assertEqual([t['tier'] for t in tiers],
                         ['ultra-rare', 'rare', 'uncommon', 'common', 'very-common'])


class TestPatternEndpoints(APITestCase):

    def test_browse_rarest_first(self):
        page = run(api.get_patterns())
        self.assertEqual([item['pattern'] for item in page.items], ['tion', 'pre', 'ing'])
        self.assertEqual(page.total, 3)
        self.assertEqual(page.page, 1)

    def test_filters(self):
        page = run(api.get_patterns(length=3, rarity='ultra-rare'))
        self.assertEqual([item['pattern'] for item in page.items], ['pre', 'ing'])
        page = run(api.get_patterns(query='ion'))
        self.assertEqual([item['pattern'] for item in page.items], ['tion'])

    def test_unknown_rarity(self):
        with self.assertRaises(HTTPException) as ctx:
            run(api.get_patterns(rarity='legendary'))
        self.assertEqual(ctx.exception.status_code, 400)

    def test_filter_change_returns_first_page(self):
        api.user_browsers['default'] = PatternBrowser(api.catalog.records, page_size=1)
        page = run(api.get_patterns(page=3))
        self.assertEqual(page.items[0]['pattern'], 'ing')
        page = run(api.get_patterns(length=3, page=2))
        self.assertEqual(page.page, 1)
        self.assertEqual(page.items[0]['pattern'], 'pre')

    def test_users_browse_independently(self):
        api.user_browsers['alice'] = PatternBrowser(api.catalog.records, page_size=1)
        run(api.get_patterns(user_id='alice', page=2))
        self.assertEqual(run(api.get_patterns(user_id='bob')).page, 1)

    def test_next_and_previous_page(self):
        api.user_browsers['default'] = PatternBrowser(api.catalog.records, page_size=2)
        page = run(api.next_patterns_page(api.UserRequest()))
        self.assertEqual(page.page, 2)
        self.assertEqual([item['pattern'] for item in page.items], ['ing'])
        self.assertEqual(run(api.next_patterns_page(api.UserRequest())).page, 2)
        self.assertEqual(run(api.previous_patterns_page(api.UserRequest())).page, 1)
        self.assertEqual(run(api.previous_patterns_page(api.UserRequest())).page, 1)

    def test_toggle_expand(self):
        page = run(api.toggle_expand(api.ExpandRequest(pattern='ING')))
        self.assertEqual(page.expanded['pattern'], 'ing')
        self.assertEqual(page.expanded['ends_count'], 4)
        page = run(api.toggle_expand(api.ExpandRequest(pattern='ing')))
        self.assertIsNone(page.expanded)
        with self.assertRaises(HTTPException) as ctx:
            run(api.toggle_expand(api.ExpandRequest(pattern='xyz')))
        self.assertEqual(ctx.exception.status_code, 404)

    def test_get_pattern(self):
        record = run(api.get_pattern('ING'))
        self.assertEqual(record['ends_words'], ["running", "jumping", "swimming", "walking"])
        with self.assertRaises(HTTPException) as ctx:
            run(api.get_pattern('xyz'))
        self.assertEqual(ctx.exception.status_code, 404)


class TestSessionEndpoints(APITestCase):

    def test_drill_set(self):
        drills = run(api.get_drills())
        self.assertEqual([p['key'] for p in drills.patterns], ['tion_ends', 'pre_starts', 'ing_ends'])
        drills = run(api.set_drill_filters(api.DrillFilterRequest(side='starts')))
        self.assertEqual([p['key'] for p in drills.patterns], ['pre_starts'])

    def test_drill_filters_ignored_during_session(self):
        run(api.toggle_selection(api.SelectRequest(key='ing_ends')))
        run(api.start_session(api.StartRequest(mode='find')))
        drills = run(api.set_drill_filters(api.DrillFilterRequest(side='starts')))
        self.assertEqual(drills.side, 'all')
        self.assertIn('ing_ends', [p['key'] for p in drills.patterns])
        response = run(api.submit_guess(api.AnswerRequest(answer='runn')))
        self.assertEqual(response.result, 'correct')

    def test_invalid_drill_side(self):
        with self.assertRaises(HTTPException) as ctx:
            run(api.set_drill_filters(api.DrillFilterRequest(side='middle')))
        self.assertEqual(ctx.exception.status_code, 400)

    def test_start_without_selection(self):
        with self.assertRaises(HTTPException) as ctx:
            run(api.start_session(api.StartRequest()))
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(ctx.exception.detail, "No patterns selected")
        self.assertEqual(run(api.get_session_state()).state, 'idle')

    def test_invalid_selection_key(self):
        with self.assertRaises(HTTPException) as ctx:
            run(api.toggle_selection(api.SelectRequest(key='ing')))
        self.assertEqual(ctx.exception.status_code, 400)

    def test_find_words_flow(self):
        run(api.toggle_selection(api.SelectRequest(key='ing_ends')))
        session = run(api.start_session(api.StartRequest(mode='find')))
        self.assertEqual(session.challenge['display'], '-ING')
        self.assertNotIn('words', session.challenge)

        response = run(api.submit_guess(api.AnswerRequest(answer='runn')))
        self.assertEqual(response.result, 'correct')
        self.assertEqual(response.session.correct_answers, 1)
        response = run(api.submit_guess(api.AnswerRequest(answer='runn')))
        self.assertEqual(response.result, 'duplicate')

        session = run(api.reveal_words(api.UserRequest()))
        self.assertTrue(session.progress['revealed'])
        self.assertEqual(session.total_attempts, 1)
        self.assertEqual(len(session.progress['words']), 4)

        session = run(api.next_challenge(api.UserRequest()))
        self.assertEqual(session.challenge_index, 1)
        self.assertFalse(session.progress['revealed'])

    def test_repeat_flow(self):
        run(api.toggle_selection(api.SelectRequest(key='pre_starts')))
        session = run(api.start_session(api.StartRequest(mode='repeat')))
        self.assertEqual(session.progress['current_word'], 'prefix')
        for _ in range(3):
            response = run(api.submit_guess(api.AnswerRequest(answer='prefix')))
        self.assertEqual(response.result, 'hidden')
        self.assertIsNone(response.session.progress['current_word'])
        response = run(api.submit_guess(api.AnswerRequest(answer='prefix')))
        self.assertEqual(response.result, 'correct')
        self.assertEqual(response.session.progress['current_word'], 'preview')

        session = run(api.skip_word(api.UserRequest()))
        self.assertEqual(session.progress['current_word'], 'prepare')

    def test_select_all_and_reset(self):
        session = run(api.select_all(api.UserRequest()))
        self.assertEqual(session.selected, ['tion_ends', 'pre_starts', 'ing_ends'])
        run(api.start_session(api.StartRequest()))
        session = run(api.reset_session(api.UserRequest()))
        self.assertEqual(session.state, 'idle')
        self.assertEqual(session.selected, [])

    def test_sessions_are_per_user(self):
        run(api.toggle_selection(api.SelectRequest(key='ing_ends', user_id='alice')))
        self.assertEqual(run(api.get_session_state('bob')).selected, [])
        self.assertEqual(run(api.get_session_state('alice')).selected, ['ing_ends'])


if __name__ == '__main__':
    unittest.main()
