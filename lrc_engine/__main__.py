from lrc_engine.cli import main

main()
