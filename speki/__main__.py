from speki.cli import main

main()
