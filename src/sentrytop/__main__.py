from sentrytop.cli import main

main()
