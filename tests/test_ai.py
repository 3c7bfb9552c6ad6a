import unittest
from types import SimpleNamespace
from unittest import mock

from assistant import TextGenerationError, TextGenerator, clean_about_text
from tests.support import ApiTestCase


class CleanAboutTextTests(unittest.TestCase):

    def test_strips_bold_and_newlines(self):
        self.assertEqual(clean_about_text("**Hi**\nthere\r\nfriend"), "Hi there friend")

    def test_caps_word_count(self):
        text = clean_about_text(" ".join(["word"] * 150))
        self.assertEqual(len(text.split()), 100)
        self.assertTrue(text.endswith("..."))


class TextGeneratorTests(unittest.TestCase):

    def _completion(self, content):
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])

    @mock.patch('openai.OpenAI')
    def test_deepseek_uses_openai_compatible_endpoint(self, openai_cls):
        openai_cls.return_value.chat.completions.create.return_value = self._completion("Hello")
        generator = TextGenerator(provider="deepseek", deepseek_api_key="key")

        self.assertEqual(generator.generate("prompt"), "Hello")
        self.assertEqual(openai_cls.call_args.kwargs['base_url'], "https://api.deepseek.com")
        call = openai_cls.return_value.chat.completions.create.call_args
        self.assertEqual(call.kwargs['model'], "deepseek-chat")
        self.assertEqual(call.kwargs['messages'], [{"role": "user", "content": "prompt"}])

    @mock.patch('anthropic.Anthropic')
    def test_anthropic_provider(self, anthropic_cls):
        anthropic_cls.return_value.messages.create.return_value = SimpleNamespace(
            content=[SimpleNamespace(text="Bonjour")])
        generator = TextGenerator(provider="anthropic", anthropic_api_key="key")
        self.assertEqual(generator.generate("prompt"), "Bonjour")

    def test_missing_key_is_generation_error(self):
        with self.assertRaises(TextGenerationError):
            TextGenerator(provider="openai").generate("prompt")

    def test_unknown_provider(self):
        with self.assertRaises(TextGenerationError):
            TextGenerator(provider="nope").generate("prompt")

    @mock.patch('openai.OpenAI')
    def test_provider_errors_are_wrapped(self, openai_cls):
        openai_cls.return_value.chat.completions.create.side_effect = RuntimeError("boom")
        generator = TextGenerator(provider="deepseek", deepseek_api_key="key")
        with self.assertRaises(TextGenerationError):
            generator.generate("prompt")

    @mock.patch('assistant.llm_client.time')
    @mock.patch('openai.OpenAI')
    def test_calls_are_spaced_by_min_interval(self, openai_cls, mock_time):
        openai_cls.return_value.chat.completions.create.return_value = self._completion("Hi")
        mock_time.time.return_value = 100.0
        generator = TextGenerator(provider="deepseek", deepseek_api_key="key", min_call_interval=2.0)

        generator.generate("first")
        mock_time.sleep.assert_not_called()
        generator.generate("second")
        mock_time.sleep.assert_called_once_with(2.0)


class AiApiTests(ApiTestCase):

    def test_generate_about(self):
        self.generator.generate.return_value = "**Driven** engineer\nwho ships."
        response = self.client.post('/api/ai/generate-about', json={'jobTitle': "Engineer", 'skills': "Python, Go"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()['about'], "Driven engineer who ships.")
        prompt = self.generator.generate.call_args.args[0]
        self.assertIn("Python, Go", prompt)

    def test_generate_about_requires_title_and_skills(self):
        response = self.client.post('/api/ai/generate-about', json={'jobTitle': "Engineer"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()['message'], "Job title and skills are required.")
        self.generator.generate.assert_not_called()

    def test_generation_failure_is_500(self):
        self.generator.generate.side_effect = TextGenerationError()
        response = self.client.post('/api/ai/generate-about', json={'jobTitle': "Engineer", 'skills': ["Python"]})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.get_json(), {'success': False, 'message': "Failed to generate About Me text."})

    def test_career_suggestions_require_login(self):
        response = self.client.post('/api/ai/career-suggestions', json={'skills': ["Python"]})
        self.assertEqual(response.status_code, 401)

    def test_career_suggestions(self):
        self.make_user()
        self.login_user(self.client)
        self.generator.generate.return_value = "- **Data Engineer**\n"
        response = self.client.post('/api/ai/career-suggestions', json={
            'skills': ["Python"],
            'experience': [{'company': "Acme", 'position': "Analyst"}],
        })
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()['suggestions'], "- Data Engineer")
        self.assertIn("Analyst at Acme", self.generator.generate.call_args.args[0])

    def test_career_suggestions_need_input(self):
        self.make_user()
        self.login_user(self.client)
        response = self.client.post('/api/ai/career-suggestions', json={})
        self.assertEqual(response.status_code, 400)


if __name__ == '__main__':
    unittest.main()
