"""
Unit tests for data models, error classification and reasoning extraction.
"""
import unittest

from ai_gateway.core.base import extract_reasoning_steps
from ai_gateway.core.exceptions import (
    FATAL_ERROR_KINDS,
    AuthenticationError,
    ErrorKind,
    MissingConfigurationError,
    RateLimitError,
    classify_error,
)
from ai_gateway.core.models import (
    ChatCompletionResponse,
    ChatMessage,
    CompletionChoice,
    UsageInfo,
)


class TestChatModels(unittest.TestCase):
    """Test unified chat models"""

    def test_message_rejects_unknown_role(self):
        with self.assertRaises(ValueError):
            ChatMessage(role="tool", content="x")

    def test_response_requires_model_and_provider(self):
        with self.assertRaises(ValueError):
            ChatCompletionResponse(id="1", model="", provider="openai", choices=[])
        with self.assertRaises(ValueError):
            ChatCompletionResponse(id="1", model="gpt-4o", provider="", choices=[])

    def test_response_to_dict(self):
        response = ChatCompletionResponse(
            id="1",
            model="gpt-4o",
            provider="openai",
            choices=[CompletionChoice(index=0, message=ChatMessage("assistant", "hi"))],
            usage=UsageInfo(prompt_tokens=1, completion_tokens=2, total_tokens=3),
            created=10,
        )
        data = response.to_dict()
        self.assertEqual(data["choices"][0]["message"], {"role": "assistant", "content": "hi"})
        self.assertEqual(data["usage"]["total_tokens"], 3)
        self.assertNotIn("raw_response", data)
        self.assertEqual(response.content, "hi")

    def test_usage_combined_with(self):
        total = UsageInfo(1, 2, 3).combined_with(UsageInfo(4, 5, 9, cost=0.5))
        self.assertEqual(total, UsageInfo(5, 7, 12, cost=0.5))


class TestErrorClassification(unittest.TestCase):
    def test_gateway_errors_carry_kind(self):
        self.assertEqual(classify_error(RateLimitError("slow down")), ErrorKind.RATE_LIMITED)
        self.assertEqual(
            classify_error(MissingConfigurationError("no key")), ErrorKind.CONFIGURATION_MISSING
        )

    def test_builtin_transport_errors(self):
        self.assertEqual(classify_error(ConnectionRefusedError()), ErrorKind.NETWORK)
        self.assertEqual(classify_error(TimeoutError()), ErrorKind.TIMEOUT)
        self.assertIsNone(classify_error(ValueError("x")))

    def test_fatal_kinds(self):
        self.assertTrue(AuthenticationError("bad").is_fatal)
        self.assertFalse(RateLimitError("slow").is_fatal)
        self.assertNotIn(ErrorKind.CONFIGURATION_INVALID, FATAL_ERROR_KINDS)


class TestReasoningExtraction(unittest.TestCase):
    def test_extracts_numbered_steps(self):
        steps = extract_reasoning_steps("Step 1: Read it.\nStep 2: Solve it.")
        self.assertEqual([s.step for s in steps], [1, 2])
        self.assertEqual(steps[1].thought, "Solve it.")
        self.assertTrue(all(s.confidence == 85 for s in steps))

    def test_no_markers(self):
        self.assertIsNone(extract_reasoning_steps("Just an answer."))
        self.assertIsNone(extract_reasoning_steps(""))


if __name__ == '__main__':
    unittest.main()
