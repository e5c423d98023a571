from people.cli import main

main()
