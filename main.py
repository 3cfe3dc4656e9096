import argparse
import json
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from core.app_context import AppContext
from core.config_loader import load_config
from core.exceptions import MatchingError, NotFoundError
from core.matcher.models import ShortlistOptions

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def run_match(ctx: AppContext, args) -> dict:
    from database.uow import matching_uow

    with matching_uow(score_offset=ctx.config.vector_index.score_offset) as repos:
        service = ctx.matcher_service(repos.candidates, repos.requirements, repos.vector_index)
        result = service.match_candidate_to_job(args.candidate_id, args.job_id)
    return result.to_dict()


def run_shortlist(ctx: AppContext, args) -> dict:
    from database.uow import matching_uow

    options = ShortlistOptions(
        min_fit_score=args.min_fit_score if args.min_fit_score is not None else ctx.config.shortlist.min_fit_score,
        max_results=args.max_results if args.max_results is not None else ctx.config.shortlist.max_results
    )
    with matching_uow(score_offset=ctx.config.vector_index.score_offset) as repos:
        service = ctx.matcher_service(repos.candidates, repos.requirements, repos.vector_index)
        shortlist = service.find_matching_candidates(args.job_id, options)
    return shortlist.to_dict()


def run_index_candidate(ctx: AppContext, args) -> dict:
    from database.uow import matching_uow

    with matching_uow(score_offset=ctx.config.vector_index.score_offset) as repos:
        service = ctx.matcher_service(repos.candidates, repos.requirements, repos.vector_index)
        for candidate_id in args.candidate_ids:
            service.index_candidate(candidate_id)
        stats = repos.vector_index.get_embedding_stats()
    return {'indexed': len(args.candidate_ids), 'stats': stats}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="TalentScout candidate fit scoring")
    parser.add_argument('--config', type=str, default='config.yaml',
                        help='Path to the YAML configuration file')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command', required=True)

    match_parser = subparsers.add_parser('match', help='Score one candidate against a job variant')
    match_parser.add_argument('candidate_id')
    match_parser.add_argument('job_id')
    match_parser.set_defaults(handler=run_match)

    shortlist_parser = subparsers.add_parser('shortlist', help='Rank the best candidates for a job variant')
    shortlist_parser.add_argument('job_id')
    shortlist_parser.add_argument('--min-fit-score', type=int, default=None)
    shortlist_parser.add_argument('--max-results', type=int, default=None)
    shortlist_parser.set_defaults(handler=run_shortlist)

    index_parser = subparsers.add_parser('index-candidate', help='Embed candidates into the vector index')
    index_parser.add_argument('candidate_ids', nargs='+')
    index_parser.set_defaults(handler=run_index_candidate)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    config = load_config(args.config)
    ctx = AppContext.build(config)

    try:
        output = args.handler(ctx, args)
    except NotFoundError as e:
        logger.error(str(e))
        return 2
    except (MatchingError, SQLAlchemyError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}", exc_info=True)
        return 1

    print(json.dumps(output, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
