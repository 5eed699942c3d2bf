import logging
from dataclasses import dataclass
from typing import List, Optional

from zxcvbn import zxcvbn

from pwcheck.cracktime import DEFAULT_ATTEMPTS_PER_SECOND, CrackTimeEstimate, estimate_crack_time
from pwcheck.dictionary import DictionaryStore
from pwcheck.entropy import EntropyResult, StrengthCategory, analyze_entropy, categorize_entropy
from pwcheck.errors import EmptyInput, InvalidType, TooLong
from pwcheck.safety import OutputSafeText, SecretGuard
from pwcheck.scoring import FinalStrength, build_recommendations, score_strength
from pwcheck.similarity import DEFAULT_SAMPLE_LIMIT, MatchKind, SimilarityFinding, detect_similarity

logger = logging.getLogger(__name__)

MAX_PASSWORD_LENGTH = 1000
# zxcvbn gets slow on long input and newer releases reject it outright
ZXCVBN_MAX_LENGTH = 72

# entries for these kinds contain the password itself, so it is masked out
_MASKED_KINDS = (MatchKind.SIMPLE_VARIATION, MatchKind.IS_SUBSTRING_OF)


def validate_password_input(password):
    if not isinstance(password, str):
        raise InvalidType()
    if len(password) == 0:
        raise EmptyInput()
    if len(password) > MAX_PASSWORD_LENGTH:
        raise TooLong()


@dataclass(frozen=True)
class SecondaryEstimate:
    score: int
    guesses_log10: float


def secondary_estimate(password):
    result = zxcvbn(password[:ZXCVBN_MAX_LENGTH])
    return SecondaryEstimate(
        score=int(result["score"]),
        guesses_log10=round(float(result["guesses_log10"]), 2),
    )


@dataclass(frozen=True)
class EvaluationResult:
    entropy: EntropyResult
    base_category: StrengthCategory
    final: FinalStrength
    finding: SimilarityFinding
    matched_password: Optional[OutputSafeText]
    detail: OutputSafeText
    crack_time: CrackTimeEstimate
    secondary: SecondaryEstimate
    recommendations: List[str]
    dictionary_size: int
    dictionary_degraded: bool

    @property
    def risk_level(self):
        return self.finding.risk_level

    def to_dict(self):
        profile = self.entropy.profile
        finding = self.finding
        return {
            "passwordMetadata": {
                "length": self.entropy.length,
                "keyspace": self.entropy.keyspace,
                "characterTypes": {
                    "hasLowercase": profile.has_lower,
                    "hasUppercase": profile.has_upper,
                    "hasNumbers": profile.has_digit,
                    "hasSymbols": profile.has_symbol,
                },
            },
            "entropyAnalysis": {
                "value": self.entropy.entropy,
                "formula": self.entropy.formula,
                "calculation": {
                    "L": self.entropy.length,
                    "N": self.entropy.keyspace,
                    "result": self.entropy.entropy,
                },
            },
            "strengthEvaluation": {
                "baseCategory": self.base_category.label,
                "baseLevel": int(self.base_category),
                "finalCategory": self.final.label,
                "level": self.final.level,
                "penalized": self.final.penalized,
                "description": self.final.description,
            },
            "similarityAnalysis": {
                "isSimilar": finding.is_similar,
                "similarityType": finding.kind.code,
                "confidence": finding.confidence,
                "riskLevel": finding.risk_level.value,
                "details": self.detail,
                "matchedPassword": self.matched_password,
                "removedPositions": list(finding.removed_positions),
                "substitutions": finding.substitutions,
                "datasetUsed": finding.dataset_used,
            },
            "dictionaryAnalysis": {
                "isCommonPassword": finding.kind is MatchKind.EXACT_MATCH,
                "dictionarySize": self.dictionary_size,
                "degraded": self.dictionary_degraded,
            },
            "securityMetrics": {
                "estimatedCrackingTime": self.crack_time.formatted,
                "crackTime": self.crack_time.to_dict(),
            },
            "secondaryEstimate": {
                "engine": "zxcvbn",
                "score": self.secondary.score,
                "guessesLog10": self.secondary.guesses_log10,
            },
            "recommendations": list(self.recommendations),
        }


class PasswordEvaluator:
    """Runs one evaluation per call against a shared dictionary.

    ``dictionary`` is either a ready ``DictionaryStore`` or a
    ``DictionaryLoader`` that is built on first use.
    """

    def __init__(
        self,
        dictionary,
        attempts_per_second=DEFAULT_ATTEMPTS_PER_SECOND,
        sample_limit=DEFAULT_SAMPLE_LIMIT,
    ):
        if isinstance(dictionary, DictionaryStore):
            self._store = dictionary
            self._loader = None
        else:
            self._store = None
            self._loader = dictionary
        self.attempts_per_second = attempts_per_second
        self.sample_limit = sample_limit

    def ensure_dictionary_loaded(self):
        if self._loader is not None:
            return self._loader.ensure_loaded()
        return self._store

    def evaluate(self, password):
        validate_password_input(password)
        store = self.ensure_dictionary_loaded()
        guard = SecretGuard(password)

        entropy = analyze_entropy(password)
        base = categorize_entropy(entropy.entropy)
        finding = detect_similarity(password, store, self.sample_limit)
        final = score_strength(base, finding.kind)
        crack_time = estimate_crack_time(entropy.entropy, self.attempts_per_second)

        result = EvaluationResult(
            entropy=entropy,
            base_category=base,
            final=final,
            finding=finding,
            matched_password=_matched_output(finding, guard),
            detail=guard.format(finding.detail_template, **dict(finding.detail_values)),
            crack_time=crack_time,
            secondary=secondary_estimate(password),
            recommendations=build_recommendations(final, finding.kind, entropy.profile),
            dictionary_size=store.size(),
            dictionary_degraded=store.degraded,
        )
        payload = guard.verify(result.to_dict())
        # the exact-match echo is the one sanctioned appearance of the password
        if finding.kind is not MatchKind.EXACT_MATCH:
            guard.verify_serialized(payload)

        logger.debug(
            "Evaluated password of length %d: %.2f bits, %s, %s",
            entropy.length, entropy.entropy, final.label, finding.kind.code,
        )
        return result


def _matched_output(finding, guard):
    if finding.matched_password is None:
        return None
    if finding.kind is MatchKind.EXACT_MATCH:
        return guard.reveal(finding.matched_password, sanctioned=True)
    if finding.kind in _MASKED_KINDS:
        return guard.mask(finding.matched_password)
    return guard.reveal(finding.matched_password)
