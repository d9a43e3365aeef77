import argparse
import logging
import sys
import textwrap
from functools import wraps

from . import Processor, TypingsValidator, ValidateError, ValidateStatus, load_validate_config

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_DUPLICATES = 1
EXIT_FATAL = 2


def needs_validator(require_preq_path: bool):
    """Decorator for commands that operate on a TypingsValidator.

    The decorated function receives (validator, args). The wrapper loads the effective
    configuration from the config file and command-line overrides, creates the Processor
    and the validator, and applies logging settings from the config file when no
    logging was requested on the command line.
    """
    def decorator(func):
        @wraps(func)
        def wrapper(args):
            config, settings = load_validate_config(
                args.config,
                typings_directory=args.dir,
                preq_path=getattr(args, 'preq', None),
                out_file_path=getattr(args, 'out', None),
                require_preq_path=require_preq_path)

            with Processor() as processor:
                validator = TypingsValidator(processor, config, settings)
                if not args.logging_configured:
                    validator.configure_logging_from_settings()
                return func(validator, args)
        return wrapper
    return decorator


def _configure_logging(args) -> bool:
    """Configure logging from command-line arguments.

    Returns:
        True if any logging destination was configured
    """
    log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    if args.log_file:
        log_level = args.log_level or ('DEBUG' if args.debug else 'INFO')
        logging.basicConfig(filename=args.log_file, level=getattr(logging, log_level), format=log_format)
        return True

    if args.debug or args.verbose or args.log_level:
        log_level = args.log_level or ('DEBUG' if args.debug else 'INFO')
        logging.basicConfig(stream=sys.stderr, level=getattr(logging, log_level), format=log_format)
        return True

    return False


def _add_config_arguments(parser: argparse.ArgumentParser):
    parser.add_argument(
        '-c', '--config',
        metavar='PATH',
        help='Path to config file. If not provided, ./tools_config.json is used when it exists.')
    parser.add_argument(
        '-d', '--dir',
        metavar='PATH',
        help='Path to the folder containing the typings to check. Overrides validateConfig.typingsDirectory.')
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging on standard error')


def dtsdup_main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog='dtsdup',
        description='Check TypeScript typings for custom module declarations that duplicate compiled typings '
                    'found in external search roots.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent('''
            Examples:
              dtsdup validate --dir ./GEOTypings --preq "C:/BSF;D:/Preq"
              dtsdup inspect --dir ./GEOTypings
            ''').strip()
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable informational logging on standard error')
    parser.add_argument(
        '--log-file',
        metavar='PATH',
        help='Path to log file for operation logging. If not provided, uses logging.path from the config file or no '
             'logging.')
    parser.add_argument(
        '--log-level',
        metavar='LEVEL',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Defaults to INFO when --log-file is provided.')
    subparsers = parser.add_subparsers(
        dest='command',
        title='Commands',
        description='Available commands',
        help='Use "dtsdup COMMAND --help" for command-specific help',
        required=True
    )

    parser_validate = subparsers.add_parser(
        'validate',
        help='Check the typings for duplicate module declarations',
        description='Extracts the custom module ids declared in the typings directory, checks each against the '
                    'compiled typings of every search root, classifies duplicates against the known duplicates '
                    'of the config file and writes the result as JSON.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent('''
            Exit status:
              0  no duplicates, or only known duplicates
              1  new duplicate modules were detected
              2  configuration error or inaccessible typings directory
            ''').strip())
    _add_config_arguments(parser_validate)
    parser_validate.add_argument(
        '-p', '--preq',
        metavar='PATHS',
        help='Search roots separated by ";". Overrides validateConfig.preqPath.')
    parser_validate.add_argument(
        '-o', '--out',
        metavar='PATH',
        help='Result file. Overrides validateConfig.outFilePath (default: ./validate_result.json).')
    parser_validate.set_defaults(method=_validate)

    parser_inspect = subparsers.add_parser(
        'inspect',
        help='List the custom module ids declared in the typings',
        description='Walks the typings directory and prints every custom module id with the file that first '
                    'declares it.')
    _add_config_arguments(parser_inspect)
    parser_inspect.set_defaults(method=_inspect)

    args = parser.parse_args(argv)
    args.logging_configured = _configure_logging(args)

    try:
        return args.method(args)
    except ValidateError as e:
        logger.debug("Run aborted", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FATAL


@needs_validator(require_preq_path=True)
def _validate(validator: TypingsValidator, args) -> int:
    run = validator.validate()
    if run.status == ValidateStatus.ERROR:
        return EXIT_DUPLICATES
    return EXIT_SUCCESS


@needs_validator(require_preq_path=False)
def _inspect(validator: TypingsValidator, args) -> int:
    for line in validator.inspect():
        print(line)
    return EXIT_SUCCESS


if __name__ == '__main__':
    sys.exit(dtsdup_main())
