"""
Tests for the player-side client, configuration and poller.

The HTTP session is mocked; no server is started.
"""

import threading
from unittest import mock

import pytest
import requests

from signage.player.client import PlayerClient, CONTENT_PATH, HEARTBEAT_PATH
from signage.player.config import PlayerConfig, DEFAULTS
from signage.player.poller import PlayerPoller


@pytest.fixture
def player_config(tmp_path, monkeypatch):
    """PlayerConfig loaded from a temporary YAML file."""
    for var in ('SIGNAGE_SERVER_URL', 'SIGNAGE_DISPLAY_ID', 'SIGNAGE_SECRET_KEY'):
        monkeypatch.delenv(var, raising=False)

    path = tmp_path / 'player.yaml'
    path.write_text(
        "server:\n"
        "  base_url: http://signage.test/\n"
        "display:\n"
        "  id: display-1\n"
        "  secret_key: s3cret\n"
        "polling:\n"
        "  content_interval: 15\n"
    )
    return PlayerConfig(str(path))


def _response(status_code, json_data=None, json_error=None):
    response = mock.Mock(status_code=status_code)
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = json_data
    return response


class TestPlayerConfig:
    """Tests for PlayerConfig."""

    def test_file_values_over_defaults(self, player_config):
        """Values in the file win; missing keys keep their defaults."""
        assert player_config.base_url == 'http://signage.test'
        assert player_config.display_id == 'display-1'
        assert player_config.secret_key == 's3cret'
        assert player_config.content_interval == 15
        assert player_config.heartbeat_interval == 60
        assert player_config.timeout == 10

    def test_env_overrides(self, tmp_path, monkeypatch):
        """Environment variables override the file."""
        monkeypatch.setenv('SIGNAGE_SECRET_KEY', 'from-env')
        monkeypatch.delenv('SIGNAGE_SERVER_URL', raising=False)
        monkeypatch.delenv('SIGNAGE_DISPLAY_ID', raising=False)

        config = PlayerConfig()

        assert config.secret_key == 'from-env'
        assert DEFAULTS['display']['secret_key'] == ''

    def test_missing_file(self, tmp_path):
        """A missing config file is an error."""
        with pytest.raises(FileNotFoundError):
            PlayerConfig(str(tmp_path / 'missing.yaml'))

    def test_non_mapping_file(self, tmp_path):
        """The file must contain a mapping."""
        path = tmp_path / 'player.yaml'
        path.write_text("- just\n- a list\n")

        with pytest.raises(ValueError):
            PlayerConfig(str(path))

    def test_dot_notation(self, player_config):
        """get/set use dotted keys."""
        player_config.set('http.timeout', 3)

        assert player_config.get('http.timeout') == 3
        assert player_config.get('no.such.key', 'fallback') == 'fallback'


class TestPlayerClient:
    """Tests for PlayerClient."""

    def test_fetch_content_success(self, player_config):
        """A valid payload is returned and credentials are sent."""
        session = mock.Mock()
        session.post.return_value = _response(200, {'isValid': True, 'items': [], 'alerts': []})
        client = PlayerClient(player_config, session=session)

        payload = client.fetch_content()

        assert payload['isValid'] is True
        session.post.assert_called_once_with(
            f'http://signage.test{CONTENT_PATH}',
            json={'displayId': 'display-1', 'secretKey': 's3cret'},
            timeout=10
        )
        assert client.consecutive_failures == 0

    def test_fetch_content_rejected(self, player_config):
        """A 401 yields None and counts as a failure."""
        session = mock.Mock()
        session.post.return_value = _response(401, {'isValid': False})
        client = PlayerClient(player_config, session=session)

        assert client.fetch_content() is None
        assert client.last_status_code == 401
        assert client.consecutive_failures == 1

    def test_fetch_content_non_json(self, player_config):
        """A body that is not JSON yields None."""
        session = mock.Mock()
        session.post.return_value = _response(200, json_error=ValueError('no json'))
        client = PlayerClient(player_config, session=session)

        assert client.fetch_content() is None

    def test_fetch_content_timeout(self, player_config):
        """Network errors are swallowed and reported as None."""
        session = mock.Mock()
        session.post.side_effect = requests.Timeout()
        client = PlayerClient(player_config, session=session)

        assert client.fetch_content() is None
        assert client.last_status_code is None
        assert client.consecutive_failures == 1

    def test_failure_counter_resets(self, player_config):
        """A success after failures resets the counter."""
        session = mock.Mock()
        session.post.side_effect = [
            requests.ConnectionError(),
            _response(200, {'isValid': True}),
        ]
        client = PlayerClient(player_config, session=session)

        client.fetch_content()
        client.fetch_content()

        assert client.consecutive_failures == 0

    def test_heartbeat(self, player_config):
        """send_heartbeat reports whether the server accepted it."""
        session = mock.Mock()
        session.post.side_effect = [_response(200, {'success': True}), _response(500)]
        client = PlayerClient(player_config, session=session)

        assert client.send_heartbeat() is True
        assert client.send_heartbeat() is False
        assert session.post.call_args[0][0] == f'http://signage.test{HEARTBEAT_PATH}'

    def test_each_thread_gets_its_own_session(self, player_config):
        """Without an injected session, poller threads never share one."""
        with mock.patch('signage.player.client.requests.Session', side_effect=lambda: mock.Mock()):
            client = PlayerClient(player_config)
            sessions = {}

            def grab(name):
                sessions[name] = client.session

            threads = [threading.Thread(target=grab, args=(name,)) for name in ('content', 'heartbeat')]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()

            assert sessions['content'] is not sessions['heartbeat']
            assert client.session is client.session

            client.close()

        sessions['content'].close.assert_called_once_with()
        sessions['heartbeat'].close.assert_called_once_with()

    def test_failure_count_across_threads(self, player_config):
        """Concurrent failures are all counted."""
        session = mock.Mock()
        session.post.side_effect = requests.ConnectionError()
        client = PlayerClient(player_config, session=session)

        def fail_many():
            for _ in range(200):
                client.send_heartbeat()

        threads = [threading.Thread(target=fail_many) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert client.consecutive_failures == 800


class TestPlayerPoller:
    """Tests for PlayerPoller."""

    def test_poll_content_once_calls_callback(self, player_config):
        """A fetched payload is stored and handed to the callback."""
        client = mock.Mock(config=player_config)
        client.fetch_content.return_value = {'isValid': True}
        received = []
        poller = PlayerPoller(client, on_content=received.append)

        poller.poll_content_once()

        assert received == [{'isValid': True}]
        assert poller.last_payload == {'isValid': True}

    def test_failed_poll_keeps_last_payload(self, player_config):
        """A failed fetch keeps the previous payload."""
        client = mock.Mock(config=player_config)
        client.fetch_content.side_effect = [{'isValid': True}, None]
        poller = PlayerPoller(client)

        poller.poll_content_once()
        assert poller.poll_content_once() is None

        assert poller.last_payload == {'isValid': True}

    def test_callback_errors_are_contained(self, player_config):
        """An exception in the callback does not escape."""
        client = mock.Mock(config=player_config)
        client.fetch_content.return_value = {'isValid': True}
        poller = PlayerPoller(client, on_content=mock.Mock(side_effect=RuntimeError('boom')))

        assert poller.poll_content_once() == {'isValid': True}

    def test_intervals_default_from_config(self, player_config):
        """Intervals come from the client's config unless given."""
        client = mock.Mock(config=player_config)

        poller = PlayerPoller(client, heartbeat_interval=5)

        assert poller.content_interval == 15
        assert poller.heartbeat_interval == 5

    def test_start_and_stop(self, player_config):
        """Threads start, poll, and stop cleanly."""
        fetched = threading.Event()
        beat = threading.Event()
        client = mock.Mock(config=player_config)
        client.fetch_content.side_effect = lambda: fetched.set()
        client.send_heartbeat.side_effect = lambda: beat.set()
        poller = PlayerPoller(client, content_interval=60, heartbeat_interval=60)

        poller.start()
        assert poller.is_running()
        assert fetched.wait(2)
        assert beat.wait(2)
        poller.stop(timeout=2)

        assert not poller.is_running()
