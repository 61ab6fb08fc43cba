from .proposal import Proposal
from .proposal_section import ProposalSection
from .proposal_event import ProposalEvent
