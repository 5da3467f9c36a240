"""Candidate selection agent (stage 3)."""

from .main import AgentCandidateSource, CandidateList, create_candidate_source

__all__ = ["AgentCandidateSource", "CandidateList", "create_candidate_source"]
