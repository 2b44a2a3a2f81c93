from gorel.cli.app import main

main()
