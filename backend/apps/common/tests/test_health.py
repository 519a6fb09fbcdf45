import json
import unittest
from unittest import mock

from apps.common import views

DB_OK = {'status': 'ok', 'latency_ms': 1.23}
CACHE_OK = {'status': 'ok'}


class HealthViewsUnitTests(unittest.TestCase):
    def test_live_health_returns_alive_payload(self):
        response = views.live_health(None)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(json.loads(response.content), {'status': 'alive'})

    @mock.patch('apps.common.views.os.getenv', return_value=None)
    @mock.patch('apps.common.views._cache_check', return_value=CACHE_OK)
    @mock.patch('apps.common.views._db_check', return_value=DB_OK)
    def test_ready_health_ok_without_redis(self, mock_db_check, _mock_cache, _mock_getenv):
        response = views.ready_health(None)
        self.assertEqual(response.status_code, 200)
        payload = json.loads(response.content)
        self.assertEqual(payload['status'], 'ok')
        self.assertEqual(payload['checks']['database'], mock_db_check.return_value)
        self.assertEqual(payload['checks']['cache'], CACHE_OK)
        self.assertEqual(payload['checks']['redis']['status'], 'skipped')

    @mock.patch('apps.common.views.os.getenv', return_value=None)
    @mock.patch('apps.common.views._cache_check', return_value={'status': 'degraded'})
    @mock.patch('apps.common.views._db_check', return_value=DB_OK)
    def test_degraded_cache_does_not_fail_readiness(self, _mock_db, _mock_cache, _mock_getenv):
        response = views.ready_health(None)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(json.loads(response.content)['checks']['cache']['status'], 'degraded')

    @mock.patch('apps.common.views.os.getenv', return_value='redis://localhost')
    @mock.patch('apps.common.views._redis_ping', return_value={'status': 'fail', 'error': 'unreachable'})
    @mock.patch('apps.common.views._cache_check', return_value=CACHE_OK)
    @mock.patch('apps.common.views._db_check', return_value={'status': 'fail', 'error': 'db down'})
    def test_ready_health_degraded_on_dependency_failure(
        self, mock_db_check, _mock_cache, mock_redis_ping, _mock_getenv
    ):
        response = views.ready_health(None)
        self.assertEqual(response.status_code, 503)
        payload = json.loads(response.content)
        self.assertEqual(payload['status'], 'degraded')
        self.assertEqual(payload['checks']['database'], mock_db_check.return_value)
        self.assertEqual(payload['checks']['redis'], mock_redis_ping.return_value)

    def test_cache_check_reads_back_written_key(self):
        fake_cache = mock.Mock()
        fake_cache.get.return_value = '1'
        with mock.patch('apps.common.views.cache', fake_cache):
            self.assertEqual(views._cache_check(), {'status': 'ok'})
        fake_cache.get.return_value = None
        with mock.patch('apps.common.views.cache', fake_cache):
            self.assertEqual(views._cache_check(), {'status': 'degraded'})
