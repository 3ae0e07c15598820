"""Tests for the console client."""

import unittest
from unittest.mock import MagicMock, patch

from cli.api_client import JargonAPIClient
from cli.console import ConsoleUI


def make_session(mode='repeat', progress=None, challenge=None):
    return {
        'state': 'active',
        'mode': mode,
        'score_display': 'Score: 0/0 (0%)',
        'challenge': challenge or {'key': 'ing_ends', 'side': 'ends', 'display': '-ING', 'count': 2},
        'progress': progress,
    }


class TestJargonAPIClient(unittest.TestCase):

    def setUp(self):
        self.client = JargonAPIClient("http://jargon.test/", user_id="alice")
        self.client.session = MagicMock()
        self.client.session.get.return_value.json.return_value = {'ok': True}
        self.client.session.post.return_value.json.return_value = {'ok': True}

    def test_get_patterns_sends_filters_and_user(self):
        self.client.get_patterns(query='ing', length=3, page=2)
        self.client.session.get.assert_called_once_with(
            "http://jargon.test/api/patterns",
            params={'query': 'ing', 'length': 3, 'page': 2, 'user_id': 'alice'}
        )

    def test_submit_answer_posts_user(self):
        self.assertEqual(self.client.submit_answer('runn'), {'ok': True})
        self.client.session.post.assert_called_once_with(
            "http://jargon.test/api/session/guess",
            json={'answer': 'runn', 'user_id': 'alice'}
        )

    def test_http_errors_raise(self):
        self.client.session.get.return_value.raise_for_status.side_effect = RuntimeError("503")
        with self.assertRaises(RuntimeError):
            self.client.get_status()


class TestConsoleUI(unittest.TestCase):

    def setUp(self):
        self.client = MagicMock()
        self.ui = ConsoleUI(self.client)

    @patch('builtins.print')
    def test_run_without_server(self, mock_print):
        self.client.health_check.side_effect = ConnectionError()
        self.ui.run()
        self.client.get_status.assert_not_called()

    @patch('builtins.print')
    def test_run_reports_load_error(self, mock_print):
        self.client.get_status.return_value = {'loaded': False, 'error': 'Error loading data: boom'}
        self.ui.run()
        mock_print.assert_any_call('Error loading data: boom')

    def make_page(self, query=None, length=None, rarity=None, expanded=None):
        return {
            'items': [], 'page': 1, 'page_size': 100, 'total': 0, 'total_pages': 0,
            'first': 0, 'last': 0, 'has_previous': False, 'has_next': False,
            'query': query, 'length': length, 'rarity': rarity, 'expanded': expanded
        }

    @patch('builtins.print')
    def test_rejected_rarity_is_not_kept(self, mock_print):
        self.client.get_patterns.side_effect = [
            self.make_page(), RuntimeError('400 Client Error'), self.make_page(query='in')
        ]
        with patch('builtins.input', side_effect=['r legendary', 's in', 'b']):
            self.ui.explore()
        self.assertEqual(self.client.get_patterns.call_args_list[-1].args, ('in', None, None))
        mock_print.assert_any_call('Error: 400 Client Error')

    @patch('builtins.print')
    def test_explore_pages_and_expands_on_server(self, mock_print):
        record = {'pattern': 'ing', 'total_count': 2, 'rarity': 'ultra-rare',
                  'ends_words': ['running', 'jumping'], 'starts_words': []}
        self.client.get_patterns.return_value = self.make_page()
        self.client.next_page.return_value = self.make_page()
        self.client.toggle_expand.return_value = self.make_page(expanded=record)
        with patch('builtins.input', side_effect=['n', 'e ing', 'b']):
            self.ui.explore()
        self.client.next_page.assert_called_once()
        self.client.toggle_expand.assert_called_once_with('ing')
        mock_print.assert_any_call('  Ending with -ing: running, jumping')

    @patch('builtins.print')
    def test_learn_requires_selection(self, mock_print):
        self.client.set_drill_filters.return_value = {
            'side': 'all', 'query': None, 'patterns': [], 'selected': []
        }
        with patch('builtins.input', side_effect=['3', '', 'f', 'b']):
            self.ui.learn()
        self.client.start_session.assert_not_called()
        mock_print.assert_any_call('Please select at least one pattern to study!')

    @patch('builtins.print')
    def test_play_find_submits_and_ends(self, mock_print):
        progress = {'revealed': False, 'found_count': 0, 'total_words': 2, 'found_words': []}
        self.client.submit_answer.return_value = {
            'result': 'correct', 'session': make_session('find', dict(progress, found_count=1))
        }
        with patch('builtins.input', side_effect=['runn', ':end']):
            self.ui.play_find(make_session('find', progress))
        self.client.submit_answer.assert_called_once_with('runn')
        self.client.reset_session.assert_called_once()
        mock_print.assert_any_call('Correct!')

    @patch('builtins.print')
    def test_play_repeat_skip_until_complete(self, mock_print):
        visible = {'complete': False, 'word_index': 0, 'total_words': 2, 'hide_word': False,
                   'current_word': 'running', 'remaining_repeats': 3}
        complete = {'complete': True, 'word_index': 2, 'total_words': 2, 'hide_word': False,
                    'current_word': None, 'remaining_repeats': 3}
        self.client.skip.return_value = make_session('repeat', complete)
        with patch('builtins.input', side_effect=[':skip', ':end']):
            self.ui.play_repeat(make_session('repeat', visible))
        self.client.skip.assert_called_once()
        self.client.reset_session.assert_called_once()


if __name__ == '__main__':
    unittest.main()
