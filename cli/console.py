"""Console UI for jargon application."""

from cli.api_client import JargonAPIClient

SIDE_CHOICES = {'1': 'ends', '2': 'starts', '3': 'all'}
SIDE_NAMES = {'ends': 'Suffixes', 'starts': 'Prefixes', 'all': 'Both'}


class ConsoleUI:
    """Console user interface for jargon application."""

    def __init__(self, client: JargonAPIClient):
        self.client = client

    def print_page(self, page: dict):
        """Print one page of patterns."""
        print('\n' + '=' * 60)
        if page['total'] == 0:
            print('No patterns match the current filters.')
        else:
            print(f"Showing {page['first']}-{page['last']} of {page['total']} patterns "
                  f"(page {page['page']} of {page['total_pages']}) - rarest first")
        filters = []
        if page['query']:
            filters.append(f"search '{page['query']}'")
        if page['length'] is not None:
            filters.append(f"length {page['length']}")
        if page['rarity']:
            filters.append(page['rarity'])
        if filters:
            print(f"Filters: {', '.join(filters)}")
        print('=' * 60)
        for item in page['items']:
            print(f"  {item['pattern'].upper():<10} {item['total_count']:>5} total  "
                  f"{item['length']}L  ends {item['ends_count']:>4}  starts {item['starts_count']:>4}  "
                  f"[{item['rarity']}]")
        if page.get('expanded'):
            self.print_pattern(page['expanded'])
        print('=' * 60)

    def print_pattern(self, record: dict):
        """Print the word lists of one pattern."""
        print(f"\n{record['pattern'].upper()} ({record['total_count']} words, {record['rarity']})")
        if record['ends_words']:
            print(f"  Ending with -{record['pattern']}: {', '.join(record['ends_words'])}")
        if record['starts_words']:
            print(f"  Starting with {record['pattern']}-: {', '.join(record['starts_words'])}")

    def print_drills(self, drills: dict):
        """Print numbered drillable patterns with their selection marks."""
        selected = set(drills['selected'])
        print(f"\n--- {SIDE_NAMES.get(drills['side'], drills['side'])}"
              f"{' matching ' + repr(drills['query']) if drills['query'] else ''} ---")
        if not drills['patterns']:
            print('No patterns found matching your criteria.')
        for idx, pattern in enumerate(drills['patterns'], start=1):
            mark = 'x' if pattern['key'] in selected else ' '
            kind = 'suffix' if pattern['side'] == 'ends' else 'prefix'
            print(f"  {idx:>3}) [{mark}] {pattern['display']} ({pattern['count']} words) [{kind}]")
        print(f"{len(selected)} selected")

    def print_score(self, session: dict):
        print(session['score_display'])

    def explore(self):
        """Browse patterns with search, length and rarity filters."""
        query, length, rarity = None, None, None
        page = self.client.get_patterns()
        while True:
            self.print_page(page)
            print('Commands: n/p (next/previous page), s <text> (search), l <n|all> (length),')
            print('          r <tier|all> (rarity), e <pattern> (show/hide words), b (back)')
            choice = input('explore> ').strip()
            command, _, arg = choice.partition(' ')
            arg = arg.strip()
            try:
                if command == 'b':
                    return
                elif command == 'n':
                    page = self.client.next_page()
                elif command == 'p':
                    page = self.client.previous_page()
                elif command == 's':
                    page = self.client.get_patterns(arg or None, length, rarity)
                    query = page['query']
                elif command == 'l':
                    page = self.client.get_patterns(query, int(arg) if arg.isdigit() else None, rarity)
                    length = page['length']
                elif command == 'r':
                    page = self.client.get_patterns(query, length, None if arg in ('', 'all') else arg)
                    rarity = page['rarity']
                elif command == 'e' and arg:
                    page = self.client.toggle_expand(arg)
                else:
                    print('Invalid choice.')
            except Exception as e:
                print(f"Error: {e}")

    def learn(self):
        """Pick drill filters and patterns, then play a drill."""
        print('\nStep 1: Choose pattern type')
        print('1) Suffixes (word endings)')
        print('2) Prefixes (word beginnings)')
        print('3) Both')
        side = SIDE_CHOICES.get(input('Choose: ').strip(), 'all')
        query = input('Step 2: Filter patterns (e.g. tion, pre; empty for all): ').strip() or None
        drills = self.client.set_drill_filters(side, query)

        while True:
            self.print_drills(drills)
            print('Commands: <number> (toggle), a (select all), c (clear),')
            print('          f (start Find Words), r (start Repeat After Me), b (back)')
            choice = input('learn> ').strip().lower()
            if choice == 'b':
                return
            elif choice == 'a':
                self.client.select_all()
            elif choice == 'c':
                self.client.clear_selection()
            elif choice in ('f', 'r'):
                if not drills['selected']:
                    print('Please select at least one pattern to study!')
                    continue
                session = self.client.start_session('find' if choice == 'f' else 'repeat')
                if session['mode'] == 'find':
                    self.play_find(session)
                else:
                    self.play_repeat(session)
                return
            elif choice.isdigit() and 0 < int(choice) <= len(drills['patterns']):
                self.client.toggle_selection(drills['patterns'][int(choice) - 1]['key'])
            else:
                print('Invalid choice.')
            drills = self.client.get_drills()

    def play_find(self, session: dict):
        """Find-words loop: type the missing part of words sharing the pattern."""
        print('\nType the missing part of each word. Commands: :show, :next, :end')
        while True:
            challenge = session['challenge']
            progress = session['progress']
            if challenge is None:
                print('This pattern is no longer available.')
                session = self.client.next_challenge()
                continue
            self.print_score(session)
            label = 'Words ending with' if challenge['side'] == 'ends' else 'Words starting with'
            print(f"\n{label}: {challenge['display']} ({challenge['count']} words total)")

            if progress['revealed']:
                print(f"You found {progress['found_count']} out of {challenge['count']} words!")
                for item in progress['words']:
                    print(f"  {'✓ ' if item['found'] else '  '}{item['word']}")
                choice = input('[Enter] next challenge, :end to stop: ').strip()
                if choice == ':end':
                    self.client.reset_session()
                    return
                session = self.client.next_challenge()
                continue

            print(f"Found words ({progress['found_count']} / {progress['total_words']}): "
                  f"{', '.join(progress['found_words']) or '-'}")
            answer = input('==> ').strip()
            if answer == ':end':
                self.client.reset_session()
                return
            elif answer == ':show':
                session = self.client.reveal()
            elif answer == ':next':
                session = self.client.next_challenge()
            elif answer:
                response = self.client.submit_answer(answer)
                session = response['session']
                if response['result'] == 'correct':
                    print('Correct!')
                elif response['result'] == 'incorrect':
                    print('Not a word with this pattern.')

    def play_repeat(self, session: dict):
        """Repeat-after-me loop: type each word three times, then from memory."""
        print('\nType each word 3 times, then from memory. Commands: :skip, :end')
        while True:
            challenge = session['challenge']
            progress = session['progress']
            if challenge is None:
                print('This pattern is no longer available.')
                session = self.client.next_challenge()
                continue
            self.print_score(session)

            if progress['complete']:
                print(f"\nPattern complete! You've practiced all {challenge['count']} words for {challenge['display']}.")
                choice = input('[Enter] next pattern, :end to stop: ').strip()
                if choice == ':end':
                    self.client.reset_session()
                    return
                session = self.client.next_challenge()
                continue

            print(f"\nWord {progress['word_index'] + 1} of {progress['total_words']} ({challenge['display']})")
            if progress['hide_word']:
                print('Type the word from memory!')
            else:
                remaining = progress['remaining_repeats']
                print(f">>> {progress['current_word']}  (type it {remaining} more time{'s' if remaining != 1 else ''})")
            answer = input('==> ').strip()
            if answer == ':end':
                self.client.reset_session()
                return
            elif answer == ':skip':
                session = self.client.skip()
            elif answer:
                response = self.client.submit_answer(answer)
                session = response['session']
                if response['result'] == 'incorrect':
                    print('Not quite, try again.')

    def run(self):
        """Run the main application loop."""
        # Check server connection
        try:
            self.client.health_check()
        except Exception:
            print(f"Error: Cannot connect to server at {self.client.base_url}")
            print("Make sure the server is running: python run_server.py")
            return

        status = self.client.get_status()
        if not status['loaded']:
            print(status.get('error') or 'Server has no data loaded.')
            return
        print(f"Loaded {status['word_count']} words, {status['record_count']} patterns")

        while True:
            print('\n=== Jargon ===')
            print('1) Explore patterns')
            print('2) Learn')
            print('q) Quit')
            choice = input('Choose: ').strip().lower()
            if choice == '1':
                self.explore()
            elif choice == '2':
                self.learn()
            elif choice == 'q':
                print('Goodbye!')
                return
            else:
                print('Invalid choice.')
