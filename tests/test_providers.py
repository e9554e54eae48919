"""
Tests for request validation and upstream URL resolution
"""
import unittest

from providers import (
    canonical_provider,
    parse_request,
    resolve_target,
    supported_providers,
)
from proxy_errors import MissingParameterError, UnsupportedProviderError


class TestParseRequest(unittest.TestCase):

    def test_missing_id_rejected_for_every_provider(self):
        """Test that a missing id wins over provider validation"""
        for provider in ['vidsrc', 'vidsrc-to', 'vidsrc-me', 'not-a-provider']:
            with self.subTest(provider=provider):
                with self.assertRaises(MissingParameterError) as ctx:
                    parse_request(provider, {'type': 'movie'})
                self.assertEqual(ctx.exception.status_code, 400)
                self.assertEqual(ctx.exception.to_dict(), {'error': 'Missing movie/show ID'})

    def test_empty_id_is_missing(self):
        with self.assertRaises(MissingParameterError):
            parse_request('vidsrc-to', {'id': ''})

    def test_unknown_provider_lists_supported(self):
        with self.assertRaises(UnsupportedProviderError) as ctx:
            parse_request('vidsrc-xyz', {'id': '550'})
        body = ctx.exception.to_dict()
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(body['supportedProviders'], ['vidsrc', 'vidsrc-to', 'vidsrc-me'])
        self.assertEqual(body['error'], "Unsupported provider. Use 'vidsrc', 'vidsrc-to', or 'vidsrc-me'")

    def test_type_defaults_to_movie(self):
        req = parse_request('vidsrc-to', {'id': '550'})
        self.assertEqual(req.type, 'movie')
        self.assertIsNone(req.tmdb)

    def test_alias_is_canonicalized(self):
        req = parse_request('vidsrc', {'id': '550'})
        self.assertEqual(req.provider, 'vidsrc-to')
        self.assertEqual(req.requested, 'vidsrc')


class TestResolveTarget(unittest.TestCase):

    def test_vidsrc_to_template(self):
        req = parse_request('vidsrc-to', {'id': '1399', 'type': 'tv'})
        self.assertEqual(resolve_target(req), 'https://vidsrc.to/embed/tv/1399')

    def test_alias_matches_vidsrc_to(self):
        """Test that /proxy/vidsrc?id=X resolves like /proxy/vidsrc-to?id=X&type=movie"""
        alias = resolve_target(parse_request('vidsrc', {'id': '550'}))
        canonical = resolve_target(parse_request('vidsrc-to', {'id': '550', 'type': 'movie'}))
        self.assertEqual(alias, canonical)

    def test_vidsrc_me_falls_back_to_id(self):
        req = parse_request('vidsrc-me', {'id': '550'})
        self.assertEqual(resolve_target(req), 'https://vidsrc.me/embed/movie?tmdb=550')

    def test_vidsrc_me_prefers_tmdb(self):
        req = parse_request('vidsrc-me', {'id': '550', 'tmdb': '680', 'type': 'movie'})
        self.assertEqual(resolve_target(req), 'https://vidsrc.me/embed/movie?tmdb=680')

    def test_values_are_percent_encoded(self):
        req = parse_request('vidsrc-to', {'id': '55/0?x=1'})
        self.assertEqual(resolve_target(req), 'https://vidsrc.to/embed/movie/55%2F0%3Fx%3D1')

    def test_templates_do_not_overlap(self):
        urls = {
            resolve_target(parse_request(name, {'id': '550'}))
            for name in ['vidsrc-to', 'vidsrc-me']
        }
        self.assertEqual(len(urls), 2)


class TestProviderTable(unittest.TestCase):

    def test_supported_providers(self):
        self.assertEqual(supported_providers(), ['vidsrc', 'vidsrc-to', 'vidsrc-me'])

    def test_every_supported_name_resolves(self):
        for name in supported_providers():
            self.assertIsNotNone(canonical_provider(name))
        self.assertIsNone(canonical_provider('vidsrc.cc'))


if __name__ == '__main__':
    unittest.main()
