# models/__init__.py

from .user import User
from .competition import Competition
from .submission import Submission
from .submission_vote import SubmissionVote
from .jury_member import JuryMember
from .jury_score import JuryScore
from .jury_scoring_progress import JuryScoringProgress
from .submission_voting_stats import SubmissionVotingStats
