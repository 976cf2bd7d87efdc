import sys
import argparse
from tubebatch.config import T, E, CONFIG_FILE, RunConfig, load_config, validate_schedule_time
from tubebatch.executors import select_executor
from tubebatch.localization import Translator, available_languages
from tubebatch.pipelines import PUBLISH, UPDATE_DESCRIPTIONS, run_pipeline
from tubebatch.quota import display_quota_usage
from tubebatch.scheduler import schedule_daily, run_forever

def show_help(translator):
    """Displays the main help message."""
    print(rf"""
{T.HEADER}╔══════════════════════════════════════════════════╗
║                                                  ║
║           T U B E   B A T C H                    ║
║        spreadsheet driven video publishing       ║
║                                                  ║
╚══════════════════════════════════════════════════╝
""")
    print(translator.get('main.welcome'))
    print(translator.get('main.commands_header'))
    print(f"{E.ROCKET} publish:              {translator.get('help.publish')}")
    print(f"{E.PROCESS} update-descriptions:  {translator.get('help.update_descriptions')}")
    print(f"{E.CLOCK} schedule:             {translator.get('help.schedule')}")

def build_parser(translator):
    parser = argparse.ArgumentParser(prog="tubebatch", description=translator.get('args.description'))
    parser.add_argument("-l", "--language", default='en', help=translator.get('args.language', languages=", ".join(available_languages())))
    parser.add_argument("--config", default=CONFIG_FILE, help=translator.get('args.config'))

    subparsers = parser.add_subparsers(dest="command", required=True, help=translator.get('args.command'))

    publish_parser = subparsers.add_parser(PUBLISH, help=translator.get('args.publish_help'))
    publish_parser.add_argument("--dry-run", action="store_true", help=translator.get('args.dry_run'))
    publish_parser.add_argument("--shorts", action="store_true", default=None, help=translator.get('args.shorts'))

    update_parser = subparsers.add_parser(UPDATE_DESCRIPTIONS, help=translator.get('args.update_help'))
    update_parser.add_argument("--dry-run", action="store_true", help=translator.get('args.dry_run'))
    update_parser.add_argument("--match-by", choices=["key", "position"], help=translator.get('args.match_by'))

    schedule_parser = subparsers.add_parser("schedule", help=translator.get('args.schedule_help'))
    schedule_parser.add_argument("pipeline", choices=[PUBLISH, UPDATE_DESCRIPTIONS], help=translator.get('args.schedule_pipeline'))
    schedule_parser.add_argument("--at", dest="at_time", help=translator.get('args.schedule_at'))
    schedule_parser.add_argument("--timezone", help=translator.get('args.schedule_timezone'))
    schedule_parser.add_argument("--run-now", action="store_true", help=translator.get('args.run_now'))
    schedule_parser.add_argument("--dry-run", action="store_true", help=translator.get('args.dry_run'))
    return parser

def build_run_config(config, args):
    return RunConfig.from_dict(config).with_overrides(
        shorts=getattr(args, 'shorts', None),
        update_match_by=getattr(args, 'match_by', None),
        schedule_time=getattr(args, 'at_time', None),
        schedule_timezone=getattr(args, 'timezone', None),
        dry_run=getattr(args, 'dry_run', None),
    )

def run_once(pipeline, run_config, translator):
    executor = select_executor(run_config, translator, dry_run=run_config.dry_run)
    return run_pipeline(pipeline, run_config, executor, translator)

def main():
    """Main function to run the script."""
    # Quick parse for language argument before full parsing
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument("-l", "--language", default='en')
    pre_args, _ = pre_parser.parse_known_args()

    translator = Translator(pre_args.language)

    if len(sys.argv) == 1 or (len(sys.argv) == 3 and ('-l' in sys.argv or '--language' in sys.argv)):
        show_help(translator)
        sys.exit(0)

    args = build_parser(translator).parse_args()

    try:
        run_config = build_run_config(load_config(translator, args.config), args)

        if args.command == "schedule":
            if not validate_schedule_time(run_config.schedule_time):
                raise ValueError(translator.get('config.invalid_schedule_time', at_time=run_config.schedule_time))
            job = lambda: run_once(args.pipeline, run_config, translator)
            schedule_daily(job, run_config.schedule_time, run_config.schedule_timezone, translator)
            if args.run_now:
                job()
            print(translator.get('main.waiting_for_schedule', T_INFO=T.INFO, E_CLOCK=E.CLOCK))
            run_forever()
        else:
            result = run_once(args.command, run_config, translator)
            if result.stopped_early:
                print(translator.get('main.stopped_early', T_WARN=T.WARN, E_WARN=E.WARN))

    except KeyboardInterrupt:
        print(translator.get('main.interrupted', T_WARN=T.WARN, E_WARN=E.WARN))
    except Exception as e:
        print(translator.get('main.fatal_error', T_FAIL=T.FAIL, E_FAIL=E.FAIL, e=e))
        sys.exit(1)
    finally:
        display_quota_usage(translator)

if __name__ == "__main__":
    main()
